"""End-to-end miner tests over small JSON corpora."""

import io

import pytest

from data_miner.assets import JsonAssetSource
from data_miner.errors import HierarchyError
from data_miner.hierarchy import ClassHierarchyIndex
from data_miner.miners import (
    FashionMiner,
    ItemMiner,
    MinerBase,
    MinerContext,
    NaturalGiftMiner,
    NpcMiner,
    ProficiencyMiner,
    TattooMiner,
    WeaponMasteryMiner,
    XiShuMiner,
    get_miner_class,
    list_miners,
    register_miner,
)
from data_miner.miners.fashion import FASHION_TABLE, strip_gender_suffix
from data_miner.miners.gametypes import FEMALE, MALE, read_gender
from data_miner.miners.mastery import MASTERY_TABLE, RESOURCE_MANAGER, format_percent
from data_miner.miners.natural_gift import GIFT_TABLE, is_good_gift, translate_gift_source
from data_miner.miners.proficiency import ENTRY_CLASS, PROFICIENCIES, PROFICIENCY_WIDGET
from data_miner.miners.tattoo import TATTOO_TABLE, tattoo_name
from data_miner.miners.xishu import TEXT_TABLE, TIPS_TABLE, XISHU_MANAGER
from data_miner.output import SqlWriter

MALE_ENUM = "EXingBieType::CHARACTER_XINGBIE_NAN"
FEMALE_ENUM = "EXingBieType::CHARACTER_XINGBIE_NV"


def _context(corpus, tmp_path, with_index=False):
    source = JsonAssetSource(corpus.root)
    index = ClassHierarchyIndex.build(source.iter_classes()) if with_index else None
    return MinerContext(
        source=source,
        output_path=str(tmp_path / "out"),
        sql=SqlWriter.for_section(io.StringIO()),
        index=index,
    )


def _csv_lines(tmp_path, folder, filename):
    text = (tmp_path / "out" / folder / filename).read_text(encoding="utf-8")
    return text.splitlines()


def _sql(context):
    return context.sql.stream.getvalue()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_builtin_miners_registered(self):
        defaults, extras = list_miners()
        assert defaults == ["Fashion", "Gift", "Item", "Mastery", "Npc", "Proficiency", "Tattoo"]
        assert extras == ["XiShu"]

    def test_lookup_is_case_insensitive(self):
        assert get_miner_class("fashion") is FashionMiner
        assert get_miner_class("GIFT") is NaturalGiftMiner
        assert get_miner_class("nope") is None

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValueError):

            @register_miner
            class OtherItemMiner(MinerBase):
                name = "Item"

        assert get_miner_class("item") is ItemMiner

    def test_csv_path(self, tmp_path):
        context = MinerContext(source=None, output_path=str(tmp_path), sql=None)
        assert FashionMiner().csv_path(context) == str(tmp_path / "Fashion" / "fashion.csv")
        assert FashionMiner().csv_path(context, "x.csv") == str(tmp_path / "Fashion" / "x.csv")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    @pytest.mark.parametrize(
        "icon, expected",
        [
            ("WenShen_Tou_3", "WenShen 3"),
            ("WenShen3_Tou", "WenShen 3"),
            ("WenShen_Tou_03", "WenShen 3"),
            ("Tribal_Shou", "Tribal"),
        ],
    )
    def test_tattoo_name(self, icon, expected):
        assert tattoo_name(icon) == expected

    def test_is_good_gift(self):
        assert is_good_gift(100001)
        assert not is_good_gift(200001)
        assert is_good_gift(300000)
        assert not is_good_gift(510000)
        assert is_good_gift(600001)
        assert not is_good_gift(600051)
        assert not is_good_gift(900000)

    def test_translate_gift_source(self):
        assert translate_gift_source("XingGe") == "Personality"
        assert translate_gift_source("Bogus") == "Unknown"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Coat (Male)", "Coat"),
            ("Robe（女）", "Robe"),
            ("Hat", "Hat"),
            ("(M)", "(M)"),
        ],
    )
    def test_strip_gender_suffix(self, name, expected):
        assert strip_gender_suffix(name) == expected

    def test_read_gender(self):
        assert read_gender(MALE_ENUM) == MALE
        assert read_gender("CHARACTER_XINGBIE_NV") == FEMALE
        assert read_gender("Other") is None


# ---------------------------------------------------------------------------
# Subclass miners
# ---------------------------------------------------------------------------


class TestItemMiner:
    @pytest.fixture
    def items(self, corpus):
        corpus.add_blueprint(
            "/Game/Items/BP_Axe",
            "/Script/WS.HDaoJuWuQi",
            Name="Axe",
            Description="Chops",
            Icon="/Game/UI/Icons/T_Axe.T_Axe",
        )
        corpus.add_blueprint("/Game/Items/BP_IronAxe", "/Game/Items/BP_Axe.BP_Axe_C", Name="Iron Axe")
        corpus.add_blueprint("/Game/Items/BP_Bread", "/Script/WS.HDaoJuShiWu", Name="Bread")
        corpus.add_blueprint("/Game/Items/BP_Mystery", "/Script/WS.HDaoJuBase")
        corpus.add_blueprint("/Game/NPC/BP_Wolf", "/Script/WS.HCharacterDongWu", MoRenMingZi="Wolf")
        return corpus

    def test_csv(self, items, tmp_path):
        context = _context(items, tmp_path, with_index=True)
        result = ItemMiner().run(context)

        assert result.success
        assert result.rows == 4
        assert _csv_lines(tmp_path, "Item", "item.csv") == [
            "class,name,description,icon",
            '"BP_Mystery_C",,,',
            '"BP_Axe_C","Axe","Chops","T_Axe"',
            '"BP_Bread_C","Bread",,',
            '"BP_IronAxe_C","Iron Axe","Chops","T_Axe"',
        ]

    def test_sql(self, items, tmp_path):
        context = _context(items, tmp_path, with_index=True)
        ItemMiner().run(context)

        sql = _sql(context)
        assert sql.startswith("truncate table `item`;\n")
        assert "('BP_IronAxe_C', 'Iron Axe', 'Chops', 'T_Axe')" in sql
        assert "('BP_Mystery_C', null, null, null)" in sql

    def test_no_items_fails(self, corpus, tmp_path):
        corpus.add_blueprint("/Game/NPC/BP_Wolf", "/Script/WS.HCharacterDongWu")
        context = _context(corpus, tmp_path, with_index=True)

        result = ItemMiner().run(context)
        assert not result.success
        assert _sql(context) == ""

    def test_requires_index(self, items, tmp_path):
        with pytest.raises(HierarchyError):
            ItemMiner().run(_context(items, tmp_path))


class TestNpcMiner:
    def test_categories(self, corpus, tmp_path):
        corpus.add_blueprint("/Game/NPC/BP_Wolf", "/Script/WS.HCharacterDongWu", MoRenMingZi="Wolf")
        corpus.add_blueprint("/Game/NPC/BP_Trader", "/Script/WS.HCharacterRen", MoRenMingZi="Trader")
        corpus.add_blueprint("/Game/NPC/BP_Ghost", "/Script/WS.HCharacterBase")
        context = _context(corpus, tmp_path, with_index=True)

        result = NpcMiner().run(context)

        assert result.success
        assert _csv_lines(tmp_path, "Npc", "npc.csv") == [
            "category,class,name",
            'nonhuman,"BP_Wolf_C","Wolf"',
            'human,"BP_Trader_C","Trader"',
            'other,"BP_Ghost_C",',
        ]
        assert "('human', 'BP_Trader_C', 'Trader')" in _sql(context)


# ---------------------------------------------------------------------------
# Table miners
# ---------------------------------------------------------------------------


class TestFashionMiner:
    @pytest.fixture
    def fashion(self, corpus):
        corpus.add_table(
            FASHION_TABLE,
            {
                "1002": {
                    "FashionName": "Coat (Female)",
                    "FashionIcon": "/Game/UI/Fashion/T_Coat.T_Coat",
                    "XingBie": FEMALE_ENUM,
                    "FashionDesc": "Warm",
                },
                "1001": {
                    "FashionName": "Coat (Male)",
                    "FashionIcon": "/Game/UI/Fashion/T_Coat.T_Coat",
                    "XingBie": MALE_ENUM,
                    "FashionDesc": "Warm",
                },
                "1003": {
                    "FashionName": "Hat",
                    "FashionIcon": "/Game/UI/Fashion/T_Hat.T_Hat",
                    "XingBie": FEMALE_ENUM,
                },
                "1004": {"FashionName": "Broken", "XingBie": MALE_ENUM},
                "bad": {"FashionName": "Nameless"},
            },
        )
        return corpus

    def test_pairs_merged(self, fashion, tmp_path, caplog):
        context = _context(fashion, tmp_path)
        result = FashionMiner().run(context)

        assert result.success
        assert result.rows == 2
        assert _csv_lines(tmp_path, "Fashion", "fashion.csv") == [
            "name,desc,id_m,id_f,icon",
            '"Coat","Warm",1001,1002,"T_Coat"',
            '"Hat",,0,1003,"T_Hat"',
        ]
        assert "Failed to parse ID 'bad'" in caplog.text
        assert "Skipping Fashion '1004'" in caplog.text

    def test_sql(self, fashion, tmp_path):
        context = _context(fashion, tmp_path)
        FashionMiner().run(context)

        sql = _sql(context)
        assert "('Coat', 'Warm', 1001, 1002, 'T_Coat'),\n" in sql
        assert "('Hat', null, 0, 1003, 'T_Hat');\n" in sql

    def test_missing_table_fails(self, corpus, tmp_path, caplog):
        result = FashionMiner().run(_context(corpus, tmp_path))
        assert not result.success
        assert "Unable to locate asset DT_Fashion." in caplog.text


class TestNaturalGiftMiner:
    @pytest.fixture
    def gifts(self, corpus):
        tough = {
            "NGEffectSource": "ENaturalGiftSource::XingGe",
            "Title": "Tough",
            "Pic": "/Game/UI/Gift/T_Tough.T_Tough",
        }
        corpus.add_table(
            GIFT_TABLE,
            {
                "100001": dict(tough, Star=1, Desc="Max HP +5"),
                "100002": dict(tough, Star=2, Desc="Max HP +10"),
                "100003": dict(tough, Star=3, Desc="Max HP +15"),
                "200001": {
                    "Star": 1,
                    "NGEffectSource": "ENaturalGiftSource::Normal",
                    "Title": "Frail",
                    "Desc": "Max HP -5",
                    "Pic": "/Game/UI/Gift/T_Frail.T_Frail",
                },
                "100010": {
                    "Star": 1,
                    "NGEffectSource": "ENaturalGiftSource::Bogus",
                    "Title": "Lucky",
                    "Desc": "Luck +1",
                    "Pic": "/Game/UI/Gift/T_Lucky.T_Lucky",
                },
            },
        )
        return corpus

    def test_tiers_merged(self, gifts, tmp_path, caplog):
        context = _context(gifts, tmp_path)
        result = NaturalGiftMiner().run(context)

        assert result.success
        assert result.rows == 3
        assert _csv_lines(tmp_path, "Gift", "gift.csv") == [
            "positive,source,level1,level2,level3,title,description,icon",
            'true,Normal,100010,,,"Lucky","Luck +1",T_Lucky',
            'false,Normal,200001,,,"Frail","Max HP -5",T_Frail',
            'true,Personality,100001,100002,100003,"Tough","Max HP +[5,10,15]",T_Tough',
        ]
        assert 'Unable to parse gift source "Bogus" for gift 100010' in caplog.text

    def test_sql(self, gifts, tmp_path):
        context = _context(gifts, tmp_path)
        NaturalGiftMiner().run(context)

        sql = _sql(context)
        assert "(true, 6, 100001, 100002, 100003, 'Tough', 'Max HP +[5,10,15]', 'T_Tough')" in sql
        assert "(false, 0, 200001, null, null, 'Frail', 'Max HP -5', 'T_Frail')" in sql

    def test_missing_table_fails(self, corpus, tmp_path):
        result = NaturalGiftMiner().run(_context(corpus, tmp_path))
        assert not result.success


class TestTattooMiner:
    @pytest.fixture
    def tattoos(self, corpus):
        corpus.add_table(
            TATTOO_TABLE,
            {
                "1": {
                    "CaiHuiIcon": "/Game/UI/WenShen/WenShen_Tou_3.WenShen_Tou_3",
                    "XingBie": MALE_ENUM,
                    "BuWei": "EHWenShenBuWei::Tou",
                    "bTeShu": False,
                    "YiXingCaiHuiIndex": 2,
                },
                "2": {
                    "CaiHuiIcon": "/Game/UI/WenShen/WenShen3_Tou.WenShen3_Tou",
                    "XingBie": FEMALE_ENUM,
                    "BuWei": "EHWenShenBuWei::Tou",
                    "bTeShu": False,
                    "YiXingCaiHuiIndex": 1,
                },
                "3": {
                    "CaiHuiIcon": "/Game/UI/WenShen/WenShen_Xiong_3.WenShen_Xiong_3",
                    "XingBie": MALE_ENUM,
                    "BuWei": "EHWenShenBuWei::Xiong",
                    "bTeShu": False,
                    "YiXingCaiHuiIndex": 4,
                },
                "5": {
                    "CaiHuiIcon": "/Game/UI/WenShen/WenShen_Tou_7.WenShen_Tou_7",
                    "XingBie": FEMALE_ENUM,
                    "BuWei": "EHWenShenBuWei::Tou",
                    "bTeShu": True,
                    "YiXingCaiHuiIndex": 0,
                },
                "9": {
                    "CaiHuiIcon": "/Game/UI/WenShen/WenShen_Tou_9.WenShen_Tou_9",
                    "XingBie": MALE_ENUM,
                    "bTeShu": False,
                },
            },
        )
        return corpus

    def test_locations_combined(self, tattoos, tmp_path, caplog):
        context = _context(tattoos, tmp_path)
        result = TattooMiner().run(context)

        assert result.success
        lines = _csv_lines(tmp_path, "Tattoo", "tattoo.csv")
        assert lines[0].split(",") == [
            "name", "special",
            "head_m", "head_f", "head_ico",
            "chest_m", "chest_f", "chest_ico",
            "arm_m", "arm_f", "arm_ico",
            "leg_m", "leg_f", "leg_ico",
        ]
        assert lines[1].split(",") == [
            "WenShen 3", "false",
            "1", "2", "WenShen_Tou_3",
            "3", "4", "WenShen_Xiong_3",
            "", "", "",
            "", "", "",
        ]
        assert lines[2].split(",") == [
            "WenShen 7", "true",
            "", "5", "WenShen_Tou_7",
            "", "", "",
            "", "", "",
            "", "", "",
        ]
        assert len(lines) == 3
        assert "Skipping tattoo '9'" in caplog.text

    def test_sql(self, tattoos, tmp_path):
        context = _context(tattoos, tmp_path)
        TattooMiner().run(context)

        assert (
            "('WenShen 3', false, 1, 2, 'WenShen_Tou_3', 3, 4, 'WenShen_Xiong_3', "
            "null, null, null, null, null, null)"
        ) in _sql(context)


class TestWeaponMasteryMiner:
    @pytest.fixture
    def masteries(self, corpus):
        def entry(mastery_id, weapon, ability):
            return {
                "JiNengIndex": mastery_id,
                "UseWuQiLeiXing": f"EWuQiLeiXing::{weapon}",
                "ZJJN": {"Ability": f"/Game/Abilities/{ability}.{ability}_C"},
            }

        corpus.add_blueprint(
            RESOURCE_MANAGER,
            "/Script/WS.HZiYuanGuanLiQi",
            ZhuanJingArray=[
                entry(101, "WUQI_LEIXING_DAO", "GA_Slash"),
                entry(102, "WUQI_LEIXING_DAO", "GA_Parry"),
                entry(201, "WUQI_LEIXING_MAO", "GA_Missing"),
            ],
            ZhuanJingAbilitySets=[101],
        )
        corpus.add_blueprint(
            "/Game/Abilities/GA_Base",
            "/Script/WS.HGameplayAbility",
            AbilityIcon="/Game/UI/T_Mastery.T_Mastery",
        )
        corpus.add_blueprint(
            "/Game/Abilities/GA_Slash",
            "/Game/Abilities/GA_Base.GA_Base_C",
            AbilityName="Slash",
            JinengMiaoshu="Deal 10% more damage",
        )
        corpus.add_blueprint(
            "/Game/Abilities/GA_Parry",
            "/Game/Abilities/GA_Base.GA_Base_C",
            AbilityName="Parry",
            AbilityIcon="/Game/UI/T_Parry.T_Parry",
        )
        corpus.add_table(
            MASTERY_TABLE,
            {
                "Dao": {
                    "UseWuQiLeiXing": "EWuQiLeiXing::WUQI_LEIXING_DAO",
                    "SLDGaiLv": [
                        {
                            "key": 30,
                            "value": {
                                "JiNengChi": [{"key": 101, "value": 3}, {"key": 102, "value": 1}]
                            },
                        },
                        {"key": 60, "value": {"JiNengChi": [{"key": 102, "value": 1}]}},
                    ],
                },
                "Broken": {"UseWuQiLeiXing": "EWuQiLeiXing::WUQI_LEIXING_NONE"},
            },
        )
        return corpus

    @pytest.mark.parametrize(
        "chance, expected", [(0.75, "75%"), (0.125, "12.5%"), (1.0, "100%"), (0.0, "0%")]
    )
    def test_format_percent(self, chance, expected):
        assert format_percent(chance) == expected

    def test_csv(self, masteries, tmp_path, caplog):
        context = _context(masteries, tmp_path, with_index=True)
        result = WeaponMasteryMiner().run(context)

        assert result.success
        assert result.rows == 2
        assert _csv_lines(tmp_path, "Mastery", "mastery.csv") == [
            "type,idx,id,name,desc,start,c30,c60,c90,c120,icon",
            '1,0,101,"Slash","Deal 10% more damage",true,75%,0%,0%,0%,T_Mastery',
            '1,1,102,"Parry",,false,25%,100%,0%,0%,T_Parry',
        ]
        assert "Failed to load ability blueprint for mastery 201." in caplog.text
        assert "row 'Broken'" in caplog.text

    def test_sql(self, masteries, tmp_path):
        context = _context(masteries, tmp_path, with_index=True)
        WeaponMasteryMiner().run(context)

        sql = _sql(context)
        assert "truncate table `zj`;" in sql
        assert "(1, 0, 101, 'Slash', 'Deal 10% more damage', true, 0.75, 0, 0, 0, 'T_Mastery')" in sql
        assert "(1, 1, 102, 'Parry', null, false, 0.25, 1, 0, 0, 'T_Parry');\n" in sql

    def test_missing_resource_manager_fails(self, corpus, tmp_path, caplog):
        result = WeaponMasteryMiner().run(_context(corpus, tmp_path, with_index=True))
        assert not result.success
        assert "Unable to locate asset BP_ZiYuanGuanLiQi." in caplog.text


class TestXiShuMiner:
    @pytest.fixture
    def xishu(self, corpus):
        exp_ratio = {
            "XiShuKey": "ExpRatio",
            "XiShuFenLei": "EGameXiShuType::EGXST_JINGYAN",
            "IsKaiGuan": False,
            "IsShow": True,
            "Description": "exp ratio",
            "XiShuMinValue": 0.1,
            "XiShuMaxValue": 10,
            "XiShuDefaultValue": 1,
            "BuTongNanDu_XiShuDefaultValue": [2, 1.5, 1, 1, 0.5, 1],
        }
        pvp = {
            "XiShuKey": "PvpOn",
            "XiShuFenLei": "EGameXiShuType::EGXST_PVPTIME",
            "IsKaiGuan": True,
            "Description": "pvp",
            "XiShuMaxValue": 1,
        }
        corpus.add_blueprint(
            XISHU_MANAGER,
            "/Script/WS.HGameXiShuGuanLiQi",
            GameXiShuConfigMap=[
                {"key": 1, "value": {"XiShuArray": [exp_ratio, pvp]}},
                {"key": 2, "value": {"XiShuArray": [dict(exp_ratio, XiShuDefaultValue=2)]}},
            ],
        )
        corpus.add_table(TEXT_TABLE, {"EXPRATIO": {"Text": "Experience Multiplier"}})
        corpus.add_table(TIPS_TABLE, {"PvpOn": {"Text": "Enables PvP"}})
        return corpus

    def test_csv_per_group(self, xishu, tmp_path):
        result = XiShuMiner().run(_context(xishu, tmp_path))

        assert result.success
        header = "name,category,index,toggle,visible,desc,tip,min,max,default,casual,easy,normal,hard,master"
        assert _csv_lines(tmp_path, "XiShu", "XiShu_1.csv") == [
            header,
            'ExpRatio,1,0,false,true,"Experience Multiplier",,0.1,10,1,2,1.5,1,1,0.5',
            'PvpOn,8,1,true,false,"pvp","Enables PvP",0,1,0,0,0,0,0,0',
        ]
        assert _csv_lines(tmp_path, "XiShu", "XiShu_2.csv")[1].startswith(
            'ExpRatio,1,0,false,true,"Experience Multiplier",,0.1,10,2,'
        )
        assert _csv_lines(tmp_path, "XiShu", "XiShu_Template.csv") == [
            "name,description,span",
            "ExpRatio,,1",
            "PvpOn,,1",
        ]

    def test_sql_interleaves_groups(self, xishu, tmp_path):
        context = _context(xishu, tmp_path)
        result = XiShuMiner().run(context)

        sql = _sql(context)
        first = sql.index("('ExpRatio', 1, 0, 1, false, true, 'Experience Multiplier', null, 0.1, 10, 1, 2, 1.5, 1, 1, 0.5)")
        second = sql.index("('ExpRatio', 2, 0, 1, false, true, 'Experience Multiplier', null, 0.1, 10, 2,")
        assert first < second
        assert "'PvpOn'" not in sql
        assert result.rows == 2

    def test_missing_tips_table_fails(self, corpus, tmp_path, caplog):
        corpus.add_blueprint(XISHU_MANAGER, "/Script/WS.HGameXiShuGuanLiQi", GameXiShuConfigMap=[])
        corpus.add_table(TEXT_TABLE, {})
        result = XiShuMiner().run(_context(corpus, tmp_path))

        assert not result.success
        assert "Unable to locate asset DT_XiShuTipsText." in caplog.text


class TestProficiencyMiner:
    @pytest.fixture
    def widget(self, corpus):
        def entry(name, **props):
            return {
                "name": name,
                "class": ENTRY_CLASS,
                "properties": [{"name": k, "value": v} for k, v in props.items()],
            }

        corpus.add_package(
            PROFICIENCY_WIDGET,
            [
                {"name": "WBP_ShuLianDu_C", "class": "WidgetBlueprintGeneratedClass"},
                entry(
                    "FaMu",
                    ShuLianDuType="EProficiency::FaMu",
                    SLDText="Logging",
                    SLDImage="/Game/UI/SLD/T_FaMu.T_FaMu",
                ),
                entry("FaMu2", ShuLianDuType="EProficiency::FaMu", SLDText="Logging again"),
                entry("Dao", ShuLianDuType="EProficiency::Dao", SLDText="Blade"),
                entry("Broken", ShuLianDuType="EProficiency::CaiKuang"),
            ],
        )
        return corpus

    def test_every_proficiency_listed(self, widget, tmp_path, caplog):
        result = ProficiencyMiner().run(_context(widget, tmp_path))

        assert result.success
        assert result.rows == len(PROFICIENCIES)
        lines = _csv_lines(tmp_path, "Proficiency", "proficiency.csv")
        assert lines[0] == "idx,id,name,icon"
        assert lines[1] == '0,FaMu,"Logging","T_FaMu"'
        assert lines[2] == "1,CaiKuang,,"
        assert lines[22] == '21,Dao,"Blade",'
        assert len(lines) == len(PROFICIENCIES) + 1
        assert "additional instance of WBP_ShuLianDuSingle_C for the FaMu" in caplog.text
        assert "(Broken)" in caplog.text

    def test_sql(self, widget, tmp_path):
        context = _context(widget, tmp_path)
        ProficiencyMiner().run(context)

        sql = _sql(context)
        assert "(0, 'FaMu', 'Logging', 'T_FaMu'),\n" in sql
        assert "(1, 'CaiKuang', null, null),\n" in sql
        assert "(29, 'DunPai', null, null);\n" in sql

    def test_missing_widget_fails(self, corpus, tmp_path, caplog):
        result = ProficiencyMiner().run(_context(corpus, tmp_path))
        assert not result.success
        assert "Unable to locate asset WBP_ShuLianDu." in caplog.text

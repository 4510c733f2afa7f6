from data_miner.output import csv_row, csv_str, db_str, write_csv

from .base import MinerContext, MinerResult, SubclassMinerBase, register_miner

# Native item roots. Blueprint items hang off whichever of these is closest,
# so each root is queried on its own.
ITEM_BASE_CLASSES = (
    "HDaoJuBase",
    "HDaoJuZhuangBei",
    "HDaoJuWuQi",
    "HDaoJu_SheJiWuQi",
    "HDaoJu_TouZhi_WuQi",
    "HDaoJuShuiTong",
    "HDaoJu_ZiDan",
    "HDaoJuXiaoHao",
    "HDaoJuChuCaoJi",
    "HDaoJuFeiLiao",
    "HDaoJuFunction",
    "HDaoJuMianJu",
    "HDaoJuShaChongJi",
    "HDaoJuShiWu",
    "HDaoJuDianChi",
    "HDaoJuHongJingShi",
    "HDaoJuJianZhu",
    "HDaoJuJianZhuPingTai",
    "HDaoJuShuiPing",
    "HDaoJuZhaoMingMoKuai",
)


@register_miner
class ItemMiner(SubclassMinerBase):
    name = "Item"

    name_property = "Name"
    description_property = "Description"
    icon_property = "Icon"

    def run(self, context: MinerContext) -> MinerResult:
        items = self.find_objects(context, ITEM_BASE_CLASSES)
        if not items:
            return self.fail("No item classes found.")

        write_csv(
            self.csv_path(context),
            "class,name,description,icon",
            (
                csv_row(
                    (
                        csv_str(item.class_name),
                        csv_str(item.name),
                        csv_str(item.description),
                        csv_str(item.icon.name if item.icon else None),
                    )
                )
                for item in items
            ),
        )

        # create table `item` (`class` varchar(127) not null, `name` varchar(127),
        #   `description` varchar(1023), `icon` varchar(127), primary key (`class`))
        sql = context.sql
        sql.start_table("item")
        for item in items:
            sql.write_row(
                f"{db_str(item.class_name)}, {db_str(item.name)}, "
                f"{db_str(item.description)}, {db_str(item.icon.name if item.icon else None)}"
            )
        sql.end_table()

        return self.finish(rows=len(items))

from data_miner.output import csv_str, db_str, write_csv

from .base import MinerContext, MinerResult, SubclassMinerBase, register_miner

# (category, native root class)
NPC_CATEGORIES = (
    ("nonhuman", "HCharacterDongWu"),
    ("human", "HCharacterRen"),
    ("other", "HCharacterBase"),
)


@register_miner
class NpcMiner(SubclassMinerBase):
    name = "Npc"

    name_property = "MoRenMingZi"

    def run(self, context: MinerContext) -> MinerResult:
        rows = []
        for category, base_class in NPC_CATEGORIES:
            for npc in self.find_objects(context, (base_class,)):
                rows.append((category, npc))

        if not rows:
            return self.fail("No NPC classes found.")

        write_csv(
            self.csv_path(context),
            "category,class,name",
            (
                f"{category},{csv_str(npc.class_name)},{csv_str(npc.name) or ''}"
                for category, npc in rows
            ),
        )

        # create table `npc` (`category` varchar(15) not null,
        #   `class` varchar(127) not null, `name` varchar(127), primary key (`class`))
        sql = context.sql
        sql.start_table("npc")
        for category, npc in rows:
            sql.write_row(f"{db_str(category)}, {db_str(npc.class_name)}, {db_str(npc.name)}")
        sql.end_table()

        return self.finish(rows=len(rows))

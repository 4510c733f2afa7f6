"""
Mining run orchestration.

Selects miners, builds the class hierarchy once when any of them needs it,
runs them on a thread pool and assembles ``update.sql``:

    runner = MineRunner(resolve_run_options(args), JsonAssetSource(path))
    result = runner.run()

Miners share the hierarchy index read-only. Each miner writes SQL into its
own buffer; buffers are copied into ``update.sql`` in miner order once every
miner has finished, so the script does not depend on thread scheduling.
"""

import io
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Optional

from data_miner.assets.source import AssetSource
from data_miner.core.config import DEFAULT_WORKERS
from data_miner.core.log import get_logger
from data_miner.hierarchy import ClassHierarchyIndex
from data_miner.miners import MinerBase, MinerContext, MinerResult, iter_miner_classes
from data_miner.output import SqlWriter
from data_miner.timing import RunTimer

logger = get_logger(__name__)

SQL_FILE_NAME = "update.sql"


def select_miners(names: Optional[Iterable[str]]) -> list[MinerBase]:
    """Instantiate miners matching ``names``.

    None selects every default-enabled miner; ``"all"`` selects every miner.
    Matching is case-insensitive. Unknown names are reported as a warning.
    """
    wanted = None if names is None else {n.lower() for n in names}
    force_all = wanted is not None and "all" in wanted

    miners = []
    for miner_cls in iter_miner_classes():
        key = miner_cls.name.lower()
        if wanted is None:
            if not miner_cls.default_enabled:
                continue
        elif not force_all and key not in wanted:
            continue
        if wanted is not None:
            wanted.discard(key)
        miners.append(miner_cls())

    if wanted:
        wanted.discard("all")
        if wanted:
            logger.warning(
                "The following miners specified in the filter could not be located: %s",
                ",".join(sorted(wanted)),
            )
    if not miners:
        logger.error("No data miners which match the passed in filter could run.")
    else:
        logger.info("The following miners will be run: %s", ",".join(m.name for m in miners))
    return miners


@dataclass
class RunResult:
    success: bool
    results: list[MinerResult] = field(default_factory=list)
    sql_path: Optional[str] = None

    @property
    def failed(self) -> list[str]:
        return [r.name for r in self.results if not r.success]


class MineRunner:
    """Runs a set of miners against one asset source."""

    def __init__(self, config: dict, source: AssetSource):
        self.config = config
        self.source = source
        self.output_path = config.get("output_path") or os.path.abspath("out")
        self.workers = config.get("workers") or DEFAULT_WORKERS
        self.miners = select_miners(config.get("miners"))
        self.index: Optional[ClassHierarchyIndex] = None
        self.timer = RunTimer()

    @property
    def requires_hierarchy(self) -> bool:
        return any(m.requires_hierarchy for m in self.miners)

    def build_index(self) -> ClassHierarchyIndex:
        """Build the hierarchy. Corpus-level failures propagate."""
        with self.timer.phase("hierarchy") as stats:
            self.index = ClassHierarchyIndex.build(self.source.iter_classes())
            stats.rows = len(self.index)
        return self.index

    def _run_miner(self, miner: MinerBase) -> tuple[MinerResult, str]:
        logger.info("Running data miner [%s]...", miner.name)
        buffer = io.StringIO()
        context = MinerContext(
            source=self.source,
            output_path=self.output_path,
            sql=SqlWriter.for_section(buffer),
            index=self.index,
        )

        start = time.perf_counter()
        with self.timer.phase(miner.name) as stats:
            try:
                result = miner.run(context)
            except Exception as e:
                logger.error(
                    "Data miner [%s] failed! [%s] %s", miner.name, type(e).__name__, e
                )
                return MinerResult(name=miner.name, success=False, message=str(e)), ""
            stats.rows += result.rows

        logger.info(
            "[%s] completed in %.2fms", miner.name, (time.perf_counter() - start) * 1000.0
        )
        if context.sql.state != SqlWriter.IN_SECTION:
            logger.error("Data miner [%s] left an unfinished SQL table; discarding its SQL", miner.name)
            return MinerResult(name=miner.name, success=False, rows=result.rows), ""
        return result, buffer.getvalue()

    def run(self) -> RunResult:
        """Run every selected miner and write ``update.sql``."""
        if not self.miners:
            return RunResult(success=False)

        self.timer.start()
        if self.requires_hierarchy and self.index is None:
            self.build_index()

        os.makedirs(self.output_path, exist_ok=True)

        with ThreadPoolExecutor(max_workers=max(1, min(self.workers, len(self.miners)))) as pool:
            outcomes = list(pool.map(self._run_miner, self.miners))

        sql_path = os.path.join(self.output_path, SQL_FILE_NAME)
        with self.timer.phase("sql"):
            with open(sql_path, "w", encoding="utf-8", newline="\n") as f:
                writer = SqlWriter(f)
                writer.start_file()
                for miner, (_, sql_text) in zip(self.miners, outcomes):
                    writer.start_section(miner.name)
                    writer.write_section_body(sql_text)
                    writer.end_section()
                writer.end_file()

        self.timer.stop()
        results = [result for result, _ in outcomes]
        success = all(r.success for r in results)
        if not success:
            logger.error(
                "Mining finished with failures: %s",
                ", ".join(r.name for r in results if not r.success),
            )
        return RunResult(success=success, results=results, sql_path=sql_path)

import asyncio
import enum
import logging
import time
from typing import Awaitable, Callable, List, Optional

from .config import PipelineConfig
from .errors import PipelineError
from .metrics import CANCELLED, ERROR, OK, Metrics
from .net import HttpClient
from .storage import read_value, write_text
from .types import FetchRequest, FetchResult, FetcherProtocol


logger = logging.getLogger(__name__)

FAN_OUT = 3
READY = "2: READY 🐶"
START_MESSAGE = "1: Will get dog pics"
DONE_MESSAGE = "3: Done getting dog pics!!"
ERROR_MESSAGE = "ERROR 🤯🤯"
SAVED_MESSAGE = "Random dog image saved to file"

Reader = Callable[[str], Awaitable[str]]
Writer = Callable[[str, str], Awaitable[None]]


class PipelineState(enum.Enum):
    IDLE = "idle"
    READING = "reading"
    FETCHING = "fetching"
    JOINING = "joining"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


class DogPicPipeline:
    """Reads a breed name, fetches random image URLs for it and saves them.

    ``run`` fans out ``FAN_OUT`` identical requests and joins them in issue
    order; ``run_single`` issues one request. Both log each step, return
    ``READY`` on success and log then re-raise the first ``PipelineError``.
    """

    def __init__(
        self,
        config: PipelineConfig,
        http_client: Optional[FetcherProtocol] = None,
        reader: Reader = read_value,
        writer: Writer = write_text,
    ):
        self.config = config
        self.http = http_client or HttpClient(
            config.user_agent, config.request_timeout, config.max_connections
        )
        self.reader = reader
        self.writer = writer
        self.metrics = Metrics()
        self.state = PipelineState.IDLE

    async def _timed_fetch(self, index: int, request: FetchRequest) -> FetchResult:
        t0 = time.perf_counter()
        try:
            result = await self.http.fetch(request)
        except asyncio.CancelledError:
            self.metrics.record_fetch(index, CANCELLED, 0, (time.perf_counter() - t0) * 1000.0)
            raise
        except PipelineError:
            self.metrics.record_fetch(index, ERROR, 0, (time.perf_counter() - t0) * 1000.0)
            raise
        self.metrics.record_fetch(index, OK, result.size_bytes, (time.perf_counter() - t0) * 1000.0)
        return result

    async def _read_breed(self) -> str:
        self.state = PipelineState.READING
        value = await self.reader(self.config.input_path)
        logger.info("Breed: %s", value)
        return value

    def _on_fetch_done(self, task: "asyncio.Task[FetchResult]") -> None:
        if self.state is PipelineState.FETCHING:
            self.state = PipelineState.JOINING

    async def _fetch_all(self, requests: List[FetchRequest]) -> List[FetchResult]:
        self.state = PipelineState.FETCHING
        # every task is scheduled before the first await
        tasks = [asyncio.create_task(self._timed_fetch(i, r)) for i, r in enumerate(requests)]
        for task in tasks:
            task.add_done_callback(self._on_fetch_done)
        try:
            return await asyncio.gather(*tasks)
        except Exception:
            # first failure wins; cancel the siblings and wait for them to settle
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _save(self, payloads: List[str]) -> None:
        self.state = PipelineState.WRITING
        await self.writer(self.config.output_path, "\n".join(payloads))
        logger.info(SAVED_MESSAGE)

    async def run(self) -> str:
        try:
            value = await self._read_breed()
            requests = [FetchRequest.for_breed(value, self.config.api_base) for _ in range(FAN_OUT)]
            results = await self._fetch_all(requests)
            images = [r.payload for r in results]
            logger.info("%s", images)
            await self._save(images)
        except PipelineError as exc:
            self.state = PipelineState.FAILED
            logger.error("%s: %s", type(exc).__name__, exc)
            raise
        self.state = PipelineState.DONE
        return READY

    async def run_single(self) -> str:
        try:
            value = await self._read_breed()
            request = FetchRequest.for_breed(value, self.config.api_base)
            self.state = PipelineState.FETCHING
            result = await self._timed_fetch(0, request)
            logger.info("%s", result.payload)
            await self._save([result.payload])
        except PipelineError as exc:
            self.state = PipelineState.FAILED
            logger.error("%s: %s", type(exc).__name__, exc)
            raise
        self.state = PipelineState.DONE
        return READY


async def get_dog_pics(pipeline: DogPicPipeline, mode: str = "parallel") -> bool:
    runners = {"parallel": pipeline.run, "single": pipeline.run_single}
    if mode not in runners:
        raise ValueError(f"Unknown mode: {mode!r}")
    logger.info(START_MESSAGE)
    try:
        x = await runners[mode]()
    except PipelineError:
        logger.error(ERROR_MESSAGE)
        return False
    logger.info(x)
    logger.info(DONE_MESSAGE)
    return True

import logging
from typing import Callable, List, Literal, Protocol, Union

from pydantic import BaseModel, ConfigDict

from src.application.schemas import ComplicationAssessment
from src.domain.errors import AnalysisFailed
from src.domain.models import CapturedImage, ClinicalInputs


logger = logging.getLogger(__name__)


class _Phase(BaseModel):
    model_config = ConfigDict(frozen=True)


class Idle(_Phase):
    phase: Literal["idle"] = "idle"


class InputDetails(_Phase):
    phase: Literal["input_details"] = "input_details"
    image: CapturedImage


class Analyzing(_Phase):
    phase: Literal["analyzing"] = "analyzing"
    image: CapturedImage
    inputs: ClinicalInputs
    request_id: int


class Success(_Phase):
    phase: Literal["success"] = "success"
    result: ComplicationAssessment
    inputs: ClinicalInputs


class Error(_Phase):
    phase: Literal["error"] = "error"
    image: CapturedImage
    inputs: ClinicalInputs
    message: str


Session = Union[Idle, InputDetails, Analyzing, Success, Error]


class AnalyzerPort(Protocol):
    async def analyze(self, image: CapturedImage, inputs: ClinicalInputs) -> ComplicationAssessment:
        ...


class SessionStateMachine:
    """
    Single owner of the session. Every transition replaces the current phase
    object; nothing else mutates it.
    """

    def __init__(self, analyzer: AnalyzerPort):
        self.analyzer = analyzer
        self._session: Session = Idle()
        self._request_id = 0
        self._listeners: List[Callable[[Session], None]] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def phase(self) -> str:
        return self._session.phase

    @property
    def is_analyzing(self) -> bool:
        return isinstance(self._session, Analyzing)

    def subscribe(self, listener: Callable[[Session], None]) -> None:
        self._listeners.append(listener)

    def _transition(self, new: Session) -> Session:
        logger.debug("Session %s -> %s", self._session.phase, new.phase)
        self._session = new
        for listener in self._listeners:
            listener(new)
        return new

    def image_acquired(self, image: CapturedImage) -> Session:
        if self.is_analyzing:
            logger.info("Ignoring captured image while an analysis is in flight")
            return self._session
        return self._transition(InputDetails(image=image))

    async def submit(self, inputs: ClinicalInputs) -> Session:
        current = self._session
        if not isinstance(current, InputDetails):
            logger.info("Ignoring submission in phase %s", current.phase)
            return current
        return await self._run_analysis(current.image, inputs)

    async def retry(self) -> Session:
        current = self._session
        if not isinstance(current, Error):
            return current
        return await self._run_analysis(current.image, current.inputs)

    def edit_details(self) -> Session:
        current = self._session
        if not isinstance(current, Error):
            return current
        return self._transition(InputDetails(image=current.image))

    def reset(self) -> Session:
        # Bumping the id orphans any analysis still in flight.
        self._request_id += 1
        return self._transition(Idle())

    async def _run_analysis(self, image: CapturedImage, inputs: ClinicalInputs) -> Session:
        self._request_id += 1
        request_id = self._request_id
        self._transition(Analyzing(image=image, inputs=inputs, request_id=request_id))

        try:
            result = await self.analyzer.analyze(image, inputs)
        except AnalysisFailed as e:
            if request_id != self._request_id:
                logger.info("Discarding failure of stale analysis request %d", request_id)
                return self._session
            return self._transition(Error(image=image, inputs=inputs, message=str(e)))

        if request_id != self._request_id:
            logger.info("Discarding result of stale analysis request %d", request_id)
            return self._session
        return self._transition(Success(result=result, inputs=inputs))

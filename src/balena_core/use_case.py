from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .errors import BalenaError
from .result import Err, Ok, Result

InputT = TypeVar("InputT")  # Input DTO
OutputT = TypeVar("OutputT")  # Output DTO


class AsyncUseCase(Generic[InputT, OutputT], ABC):
    """
    Asynchronous use case base.

    Subclasses implement `aperform(input)` and may override hooks:
      - avalidate(input): raise ValidationError to fail before any remote call
      - aafter(result): side-effect hook after execution

    Execution contract:
      - Returns Result[O, BalenaError]
      - Exceptions of type BalenaError are captured as Err, unchanged
      - Other exceptions are propagated (let calling layer decide)
    """

    async def execute(self, input: InputT) -> Result[OutputT, BalenaError]:
        try:
            await self.avalidate(input)
            out = await self.aperform(input)
            res: Result[OutputT, BalenaError] = Ok(out)
            await self.aafter(res)
            return res
        except BalenaError as be:
            res = Err(be)
            await self.aafter(res)
            return res

    # Hooks ------------------------------------------------------------------

    async def avalidate(self, input: InputT) -> None:
        return None

    async def aafter(self, result: Result[OutputT, BalenaError]) -> None:
        return None

    # Implementation point ---------------------------------------------------

    @abstractmethod
    async def aperform(self, input: InputT) -> OutputT:
        """
        Implement the use case logic.

        Raise BalenaError to signal failures that should map to Err.
        """
        raise NotImplementedError

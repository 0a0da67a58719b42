"""
Base transaction builder.

Builders collect fields with chainable setters, validate them into the
pydantic parameter model, and hand the result to a TransactionMapper.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Type, TypeVar

import pydantic

from ...codec.record import WireRecord
from ...runtime.errors import ValidationError
from ..mapper import TransactionMapper

ParamsT = TypeVar("ParamsT", bound=pydantic.BaseModel)


class BuilderError(ValidationError):
    """Transaction builder specific errors."""
    pass


class BaseTxBuilder(Generic[ParamsT], ABC):
    """
    Base class for all transaction builders.

    Generic over ParamsT = the parameter model of the transaction kind.
    """

    def __init__(self):
        self._fields: Dict[str, Any] = {}

    @property
    @abstractmethod
    def tx_kind(self) -> str:
        """Transaction kind name, as found in the transaction type table."""

    @property
    @abstractmethod
    def params_cls(self) -> Type[ParamsT]:
        """Parameter model class."""

    def with_field(self, name: str, value: Any) -> BaseTxBuilder[ParamsT]:
        """Set a field value (chainable)."""
        self._fields[name] = value
        return self

    def get_field(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def build(self) -> ParamsT:
        """
        Validate the collected fields into the parameter model.

        Raises:
            BuilderError: If validation fails
        """
        try:
            return self.params_cls.model_validate(self._fields)
        except pydantic.ValidationError as e:
            problems = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            raise BuilderError(f"Invalid {self.tx_kind} transaction: {'; '.join(problems)}", cause=e)

    def validate(self) -> None:
        self.build()

    def to_record(self, mapper: Optional[TransactionMapper] = None) -> WireRecord:
        """Submitted transaction record {0: type index, 1: params}."""
        mapper = mapper or TransactionMapper()
        return mapper.build_submitted_txn(self.tx_kind, self.build())

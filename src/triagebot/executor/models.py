"""Data models for the Action Executor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Mutation:
    """One GraphQL mutation, ready to submit.

    Attributes:
        name: Mutation field name (e.g., "addLabelsToLabelable").
        input: Value of the mutation's ``input`` argument.
    """

    name: str
    input: dict[str, Any]

    @property
    def input_type(self) -> str:
        return self.name[0].upper() + self.name[1:] + "Input"

    @property
    def document(self) -> str:
        """GraphQL document for this mutation, taking ``$input`` as variable."""
        return (
            f"mutation($input: {self.input_type}!) "
            f"{{ {self.name}(input: $input) {{ clientMutationId }} }}"
        )

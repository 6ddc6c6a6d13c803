"""Common utilities for tests."""

from typing import Any, Iterator
from unittest.mock import MagicMock

from mockfirestore.document import DocumentReference


class MockArrayUnion:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockArrayRemove:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockIncrement:
    def __init__(self, value: int) -> None:
        self.value = value


SENTINELS = (MockArrayUnion, MockArrayRemove, MockIncrement)


def mock_firestore_module(db: Any) -> MagicMock:
    """Stand-in for firebase_admin.firestore whose client() returns ``db``."""
    module = MagicMock()
    module.client.return_value = db
    module.ArrayUnion = MockArrayUnion
    module.ArrayRemove = MockArrayRemove
    module.Increment = MockIncrement
    return module


def _resolve_sentinel(existing: Any, value: Any) -> Any:
    if isinstance(value, MockArrayUnion):
        merged = list(existing) if isinstance(existing, list) else []
        # Firestore applies a set union
        for item in value.values:
            if item not in merged:
                merged.append(item)
        return merged
    if isinstance(value, MockArrayRemove):
        current = existing if isinstance(existing, list) else []
        return [i for i in current if i not in value.values]
    return (existing or 0) + value.value


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore so update() resolves sentinels."""
    if not hasattr(DocumentReference, "_orig_update"):
        DocumentReference._orig_update = DocumentReference.update

        def patched_update(self: Any, data: dict[str, Any]) -> Any:
            if not any(isinstance(v, SENTINELS) for v in data.values()):
                return self._orig_update(data)

            current_data = self.get().to_dict() or {}
            new_data = {
                k: _resolve_sentinel(current_data.get(k), v)
                if isinstance(v, SENTINELS)
                else v
                for k, v in data.items()
            }
            return self._orig_update(new_data)

        DocumentReference.update = patched_update

"""Shared fixtures."""

import copy
from typing import Any

import pytest
from amplifier_assets import Scope


class MemoryExtraData:
    """Extra data store kept in a dict."""

    def __init__(self, data: dict | None = None):
        self.data: dict[str, Any] = data or {}

    def get_extra_key(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self.data.get(key, default))

    def has_extra_key(self, key: str) -> bool:
        return key in self.data

    def set_extra_key(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)

    def remove_extra_key(self, key: str) -> None:
        self.data.pop(key, None)


class FailingExtraData(MemoryExtraData):
    """Extra data store whose writes fail while ``failing`` is set."""

    def __init__(self, data: dict | None = None, failing: bool = True):
        super().__init__(data)
        self.failing = failing

    def set_extra_key(self, key: str, value: Any) -> None:
        if self.failing:
            raise OSError("disk full")
        super().set_extra_key(key, value)

    def remove_extra_key(self, key: str) -> None:
        if self.failing:
            raise OSError("disk full")
        super().remove_extra_key(key)


@pytest.fixture
def root_extra():
    return MemoryExtraData()


@pytest.fixture
def root_scope(root_extra):
    return Scope("acme/blog", root_extra)

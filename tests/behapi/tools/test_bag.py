"""Tests for Bag."""

from behapi.services.protocols import Resettable
from behapi.tools.bag import Bag


class TestBag:
    def test_reset_restores_initial_content(self) -> None:
        # Arrange
        bag = Bag({"token": None})
        bag["token"] = "abc"
        bag["user"] = 42

        # Act
        bag.reset()

        # Assert
        assert dict(bag) == {"token": None}

    def test_behaves_as_mapping(self) -> None:
        bag = Bag()
        bag["a"] = 1
        del bag["a"]
        bag["b"] = 2

        assert list(bag) == ["b"]
        assert len(bag) == 1
        assert repr(bag) == "Bag({'b': 2})"

    def test_satisfies_resettable_protocol(self) -> None:
        assert isinstance(Bag(), Resettable)

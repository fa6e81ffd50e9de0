"""Menu content: a tree of labelled entries for the menubar and popups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Literal

from tuikit.event import Callback

MenuItemKind = Literal["leaf", "subtree", "delimiter"]


@dataclass
class MenuItem:
    """One entry: an action (leaf), a nested menu (subtree) or a separator."""

    kind: MenuItemKind
    label: str = ""
    callback: Callback | None = None
    subtree: MenuTree | None = None

    @property
    def is_leaf(self) -> bool:
        return self.kind == "leaf"

    @property
    def is_subtree(self) -> bool:
        return self.kind == "subtree"

    @property
    def is_delimiter(self) -> bool:
        return self.kind == "delimiter"


@dataclass
class MenuTree:
    """Ordered menu entries.

    The ``add_*`` methods mutate in place; the bare-named variants return the
    tree so menus can be declared in one expression::

        MenuTree().leaf("New", new_file).delimiter().leaf("Quit", Application.quit)
    """

    children: list[MenuItem] = field(default_factory=list)

    # Mutating API

    def add_leaf(self, label: str, callback: Callback) -> None:
        self.children.append(MenuItem("leaf", label, callback=callback))

    def add_subtree(self, label: str, tree: MenuTree) -> None:
        self.children.append(MenuItem("subtree", label, subtree=tree))

    def add_delimiter(self) -> None:
        self.children.append(MenuItem("delimiter"))

    # Builder API

    def leaf(self, label: str, callback: Callback) -> MenuTree:
        self.add_leaf(label, callback)
        return self

    def subtree(self, label: str, tree: MenuTree) -> MenuTree:
        self.add_subtree(label, tree)
        return self

    def delimiter(self) -> MenuTree:
        self.add_delimiter()
        return self

    def with_(self, fn: Callable[[MenuTree], None]) -> MenuTree:
        """Run *fn* on this tree and return the tree."""
        fn(self)
        return self

    # Queries

    def find_subtree(self, label: str) -> MenuTree | None:
        """Return the first direct subtree called *label*."""
        for item in self.children:
            if item.is_subtree and item.label == label:
                return item.subtree
        return None

    def is_empty(self) -> bool:
        return not self.children

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(self.children)

    def __getitem__(self, index: int) -> MenuItem:
        return self.children[index]

"""
Window/workspace tree model.

The tree query returns one JSON object per node, nested through ``nodes``.
Only the fields swayctl interprets are modelled; everything else (rect,
app_id, marks, floating_nodes, ...) is kept as opaque extra attributes.
"""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


WORKSPACE = "workspace"


class Node(BaseModel):
    """One entry of the window/workspace tree.

    ``type`` is an open set of strings; new container kinds pass through.

    Example:
        >>> root = Node.model_validate({"type": "root", "nodes": [{"type": "con", "pid": 42}]})
        >>> root.children[0].pid
        42
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    type: str = Field(..., description="Node kind (root, output, workspace, con, ...)")
    children: Tuple[Node, ...] = Field(
        default_factory=tuple,
        validation_alias=AliasChoices("nodes", "children"),
        serialization_alias="nodes",
        description="Child nodes in tree order",
    )
    id: Optional[int] = Field(default=None, description="Container ID")
    name: Optional[str] = Field(default=None, description="Title or workspace name")
    pid: Optional[int] = Field(default=None, description="Owning process ID")
    visible: Optional[bool] = Field(default=None)
    focused: Optional[bool] = Field(default=None)

    @property
    def attributes(self) -> Dict[str, Any]:
        """Uninterpreted fields from the tree query."""
        return dict(self.model_extra or {})

    @property
    def is_leaf_candidate(self) -> bool:
        """Childless and not a workspace."""
        return not self.children and self.type != WORKSPACE

    def walk(self) -> Iterator[Node]:
        """Iterate over this node and its descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, predicate: Callable[[Node], bool]) -> Optional[Node]:
        """Return the first node (pre-order) matching predicate, or None."""
        for node in self.walk():
            if predicate(node):
                return node
        return None

    def workspaces(self) -> List[Node]:
        """All workspace nodes, in tree order."""
        return [node for node in self.walk() if node.type == WORKSPACE]


Node.model_rebuild()


def list_windows(
    root: Node,
    visible_only: bool = False,
    focused_only: bool = False,
    owned_only: bool = False,
    pid: Optional[int] = None,
) -> List[Node]:
    """Flatten the tree into the nodes that look like windows.

    A node matches when it has no children, is not a workspace, and passes
    every enabled filter. Matching stops the descent; other nodes contribute
    the concatenated matches of their children, in order.

    The test is structural. It collects empty terminal containers that are
    not workspaces, which in practice are the windows, but a childless
    container of some other kind would be reported as well.

    Args:
        root: Tree to search
        visible_only: Only keep nodes whose ``visible`` is truthy
        focused_only: Only keep nodes whose ``focused`` is truthy
        owned_only: Only keep nodes owned by ``pid``
        pid: Process ID for ``owned_only`` (default: this process)

    Returns:
        Matching nodes in tree order
    """
    if owned_only and pid is None:
        pid = os.getpid()

    def matches(node: Node) -> bool:
        if not node.is_leaf_candidate:
            return False
        if owned_only and node.pid != pid:
            return False
        if visible_only and not node.visible:
            return False
        if focused_only and not node.focused:
            return False
        return True

    def collect(node: Node) -> List[Node]:
        if matches(node):
            return [node]
        windows: List[Node] = []
        for child in node.children:
            windows.extend(collect(child))
        return windows

    return collect(root)


def find_focused(root: Node) -> Optional[Node]:
    """Return the focused window, if any."""
    windows = list_windows(root, focused_only=True)
    return windows[0] if windows else None

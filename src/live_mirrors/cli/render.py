"""
Mirror report rendering.

Presents a class mirror as a Rich summary table or a Rich tree of its nested
classes. Row data is also available as plain tuples for other front ends.
"""

from typing import Callable, List, Optional, Set, Tuple

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from live_mirrors.exceptions import UnsupportedOperationError
from live_mirrors.mirrors.class_mirror import ClassMirror
from live_mirrors.utils.console import console as default_console


def _names(mirrors: List) -> str:
  return ", ".join(m.name() for m in mirrors) or "-"


class MirrorReport:
  """
  Renders the structural summary of one class mirror.
  """

  def __init__(self, mirror: ClassMirror, console: Optional[Console] = None):
    """
    Args:
        mirror (ClassMirror): The mirror to describe.
        console (Console, optional): Output target; the shared console by default.
    """
    self.mirror = mirror
    self.console = console or default_console

  def kind_label(self) -> str:
    """'class' or 'module', with heuristic flags appended."""
    label = "class" if self.mirror.is_class() else "module"
    if self.mirror.is_singleton_class():
      label += " (singleton)"
    if self.mirror.is_anonymous():
      label += " (anonymous)"
    return label

  def rows(self) -> List[Tuple[str, str]]:
    """
    Returns the summary as (label, value) pairs.

    Returns:
        List[Tuple[str, str]]: Rows in display order.
    """
    m = self.mirror
    rows: List[Tuple[str, Callable[[], str]]] = [
      ("Name", m.name),
      ("Kind", self.kind_label),
      ("File", lambda: m.file() or "unknown"),
      ("Superclass", self._superclass),
      ("Ancestors", lambda: _names(m.ancestors())),
      ("Mixins", lambda: _names(m.mixins())),
      ("Subclasses", lambda: _names(m.subclasses())),
      ("Nesting", lambda: _names(m.nesting())),
      ("Constants", lambda: _names(m.constants())),
      ("Class variables", lambda: _names(m.class_variables())),
      ("Class instance variables", lambda: _names(m.class_instance_variables())),
      ("Class methods", lambda: _names(m.class_methods())),
      ("Instance methods", lambda: _names(m.instance_methods())),
      ("Nested classes", lambda: _names(m.nested_classes())),
    ]
    return [(label, producer()) for label, producer in rows]

  def _superclass(self) -> str:
    try:
      parent = self.mirror.superclass()
    except UnsupportedOperationError:
      return "-"
    return parent.name() if parent is not None else "-"

  def render_table(self) -> None:
    """Prints the summary table."""
    table = Table(title=f"Mirror of {self.mirror.name()}", show_header=True, header_style="bold magenta")
    table.add_column("Query", style="cyan", no_wrap=True)
    table.add_column("Result")
    for label, value in self.rows():
      table.add_row(label, value)
    self.console.print(table)

  def build_tree(self, depth: int) -> Tree:
    """
    Builds a tree of nested classes.

    Args:
        depth (int): Levels of nesting to expand below the root.

    Returns:
        Tree: The Rich tree.
    """
    root = Tree(f"[bold magenta]{self.mirror.name()}[/bold magenta]")
    self._grow(root, self.mirror, depth, {self.mirror.subject_id})
    return root

  def _grow(self, node: Tree, mirror: ClassMirror, depth: int, seen: Set[int]) -> None:
    if depth <= 0:
      return
    for child in mirror.nested_classes():
      if child.subject_id in seen:
        node.add(f"[dim]{child.name()} (cycle)[/dim]")
        continue
      branch = node.add(child.name())
      self._grow(branch, child, depth - 1, seen | {child.subject_id})

  def render_tree(self, depth: int) -> None:
    """Prints the nested-class tree."""
    self.console.print(self.build_tree(depth))

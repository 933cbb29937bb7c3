"""
Package/File inference for class mirrors.

Answers "which file defines this class?" on a best-effort basis. Python
records no authoritative defining file for a class (``inspect.getfile`` only
follows ``__module__``), so the resolver combines several signals:

1.  **Modules**: the ``__file__`` in the module's raw namespace.
2.  **Method locations**: the file that holds most of the class's own methods,
    preferring one named after the class (``HttpServer`` -> ``http_server.py``).
3.  **Defining module**: the ``__file__`` of the module named by ``__module__``.
4.  **Static analysis (Griffe)**: loads the defining module statically and
    reads the object's ``filepath``. Useful for classes whose module was
    replaced in ``sys.modules`` or built without ``__file__``.

Resolution never raises; ``None`` means "unknown".
"""

import logging
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

import griffe

from live_mirrors.exceptions import MirrorError
from live_mirrors.mirrors import namespace
from live_mirrors.mirrors.naming import underscore
from live_mirrors.rebind import is_instance, rebind

if TYPE_CHECKING:
  from live_mirrors.mirrors.class_mirror import ClassMirror

logger = logging.getLogger(__name__)

# Suppress Griffe errors which are often noisy static analysis failures
logging.getLogger("griffe").setLevel(logging.CRITICAL)


class PackageResolver:
  """
  Best-effort class-to-file resolver.

  Attributes:
      static_fallback (bool): Whether Griffe may be consulted.
      _package_cache (Dict[str, griffe.Object]): Cache of statically parsed Griffe trees.
  """

  def __init__(self, static_fallback: bool = True):
    self.static_fallback = static_fallback
    self._package_cache: Dict[str, Any] = {}

  def resolve(self, mirror: "ClassMirror") -> Optional[str]:
    """
    Attributes a class or module mirror to a file on disk.

    Args:
        mirror (ClassMirror): The mirror to attribute.

    Returns:
        Optional[str]: The path, or None if it cannot be determined.
    """
    try:
      subject = mirror.subject
      if not mirror.is_class():
        return self._module_file(subject)

      return self._from_methods(mirror) or self._from_module(subject) or self._from_static(subject)
    except MirrorError as e:
      logger.debug("File resolution failed for %r: %s", mirror, e)
      return None

  def _module_file(self, module: Any) -> Optional[str]:
    path = namespace.own_namespace(module).get("__file__")
    return path if is_instance(path, str) else None

  def _from_methods(self, mirror: "ClassMirror") -> Optional[str]:
    counts: Counter = Counter()
    for method in mirror.instance_methods() + mirror.class_methods():
      location = method.source_location()
      if location is not None:
        counts[location.file] += 1
    if not counts:
      return None

    expected_stem = underscore(mirror.demodulized_name())
    for path, _ in counts.most_common():
      if Path(path).stem == expected_stem:
        return path
    return counts.most_common(1)[0][0]

  def _from_module(self, cls: type) -> Optional[str]:
    module = namespace.defining_module(cls)
    if module is None:
      return None
    return self._module_file(module)

  def _from_static(self, cls: type) -> Optional[str]:
    if not self.static_fallback:
      return None

    module_name = rebind(type, cls, "__module__")()
    qualname = rebind(type, cls, "__qualname__")()
    if not is_instance(module_name, str) or not is_instance(qualname, str):
      return None

    try:
      if module_name in self._package_cache:
        root = self._package_cache[module_name]
      else:
        root = griffe.load(module_name)
        self._package_cache[module_name] = root
      filepath = root[qualname].filepath
    except Exception as e:
      # Griffe failed (C extensions, dynamic modules); attribution stays unknown.
      logger.debug("Static lookup of %s.%s failed: %s", module_name, qualname, e)
      return None

    if isinstance(filepath, list):
      filepath = filepath[0] if filepath else None
    return str(filepath) if filepath else None

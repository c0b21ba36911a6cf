"""
Declaration Tree Walker.

This module provides the `TreeWalker`, which traverses a lowered
``SourceFile`` and feeds recognized declarations into a ``ManifestBuilder``,
and the `analyze` entry point wrapping one complete analysis run.

Traversal rules:

1.  **Block**: its comment is parsed into block level annotations. A ``skip``
    excludes every spec in the block.
2.  **Spec**: its own comment is merged over the block annotations. A ``skip``
    excludes only that spec.
3.  **Call**: recognized calls receive the merged annotations. An override
    for a field the call already supplies inline is a conflict.
4.  Traversal then continues into the call arguments with empty annotations,
    so directives bind to the outermost declaration of each value only.

The walk is single pass and fail fast: every visit returns the first error
found beneath it (or None) and callers stop descending as soon as one
appears. A failed run never yields a manifest.
"""

from typing import Callable, Dict, Optional

from pyaction.analysis.annotations import EMPTY_ANNOTATIONS, AnnotationParser, AnnotationSet
from pyaction.analysis.patterns import Declaration, recognize
from pyaction.config import RuntimeConfig
from pyaction.core.errors import AnalysisError, AnnotationConflictError, DuplicateDeclarationError
from pyaction.core.manifest import InputRecord, ManifestBuilder, OutputRecord
from pyaction.core.nodes import Call, DeclarationBlock, Opaque, SourceFile, Spec
from pyaction.core.result import AnalysisResult
from pyaction.enums import NodeKind
from pyaction.utils.docstrings import synopsis

VisitOutcome = Optional[AnalysisError]


class TreeWalker:
  """
  Walks declaration blocks and accumulates declarations.

  Attributes:
      builder (ManifestBuilder): Receives the validated records.
      parser (AnnotationParser): Parses comment groups.
  """

  def __init__(self, builder: ManifestBuilder, parser: AnnotationParser):
    self.builder = builder
    self.parser = parser
    self._dispatch: Dict[NodeKind, Callable[..., VisitOutcome]] = {
      NodeKind.BLOCK: self.visit_block,
      NodeKind.SPEC: self.visit_spec,
      NodeKind.CALL: self.visit_call,
      NodeKind.OPAQUE: self.visit_opaque,
      NodeKind.IDENTIFIER: self.visit_leaf,
      NodeKind.LITERAL: self.visit_leaf,
    }

  def walk(self, source: SourceFile) -> VisitOutcome:
    """
    Traverses every block of a source file.

    Args:
        source: The lowered source file.

    Returns:
        The first error found, or None.
    """
    for block in source.blocks:
      error = self.visit(block, EMPTY_ANNOTATIONS)
      if error is not None:
        return error
    return None

  def visit(self, node, annotations: AnnotationSet) -> VisitOutcome:
    """
    Dispatches on the node kind tag.

    Args:
        node: Any node of the lowered tree except ``SourceFile``.
        annotations: Annotations in effect for this node.

    Returns:
        The first error found beneath ``node``, or None.
    """
    return self._dispatch[node.kind](node, annotations)

  def visit_block(self, block: DeclarationBlock, annotations: AnnotationSet) -> VisitOutcome:
    scoped = annotations.merge(self.parser.parse(block.comments))
    if scoped.skip:
      return None

    for spec in block.specs:
      error = self.visit(spec, scoped)
      if error is not None:
        return error
    return None

  def visit_spec(self, spec: Spec, annotations: AnnotationSet) -> VisitOutcome:
    scoped = annotations.merge(self.parser.parse(spec.comments))
    if scoped.skip:
      return None

    for value in spec.values:
      error = self.visit(value, scoped)
      if error is not None:
        return error
    return None

  def visit_call(self, call: Call, annotations: AnnotationSet) -> VisitOutcome:
    recognition = recognize(call)
    if recognition.error is not None:
      return recognition.error

    nested = annotations
    if recognition.recognized:
      error = self._declare(recognition.declaration, annotations)
      if error is not None:
        return error
      nested = EMPTY_ANNOTATIONS

    for receiver in call.receiver_calls:
      error = self.visit(receiver, nested)
      if error is not None:
        return error

    for arg in call.args:
      error = self.visit(arg.value, nested)
      if error is not None:
        return error
    return None

  def visit_opaque(self, node: Opaque, annotations: AnnotationSet) -> VisitOutcome:
    for call in node.calls:
      error = self.visit(call, annotations)
      if error is not None:
        return error
    return None

  def visit_leaf(self, node, annotations: AnnotationSet) -> VisitOutcome:
    # Identifier / Literal: nothing below.
    return None

  def _declare(self, declaration: Declaration, annotations: AnnotationSet) -> VisitOutcome:
    """
    Applies annotations to a declaration and hands it to the builder.

    Args:
        declaration: The recognized declaration.
        annotations: The merged annotations of the enclosing spec.

    Returns:
        An AnnotationConflictError or DuplicateDeclarationError, or None.
    """
    record = declaration.record

    if annotations.description_override:
      if record.description:
        return AnnotationConflictError(
          f"description of '{record.name}' is set both inline and by annotation",
          annotations.description_position,
        )
      record = record.model_copy(update={"description": annotations.description_override})

    if isinstance(record, OutputRecord):
      if self.builder.has_output(record.name):
        return DuplicateDeclarationError(f"output '{record.name}' is declared more than once", declaration.position)
      self.builder.add_output(record.name, record)
      return None

    return self._declare_input(record, declaration, annotations)

  def _declare_input(
    self, record: InputRecord, declaration: Declaration, annotations: AnnotationSet
  ) -> VisitOutcome:
    if annotations.default_override:
      if record.default is not None:
        return AnnotationConflictError(
          f"default of '{record.name}' is set both inline and by annotation",
          annotations.default_position,
        )
      record = record.model_copy(update={"default": annotations.default_override})

    if annotations.required:
      record = record.model_copy(update={"required": True})

    if self.builder.has_input(record.name):
      return DuplicateDeclarationError(f"input '{record.name}' is declared more than once", declaration.position)

    self.builder.add_input(record.name, record)
    return None


def analyze(source: SourceFile, config: Optional[RuntimeConfig] = None) -> AnalysisResult:
  """
  Runs one complete analysis of a lowered source file.

  Args:
      source: The lowered source file.
      config: Runtime configuration. Defaults are used when None.

  Returns:
      AnalysisResult: The finalized manifest, or the first fatal error.
  """
  config = config or RuntimeConfig()
  builder = ManifestBuilder(name=source.name, description=synopsis(source.doc))
  walker = TreeWalker(builder, AnnotationParser(config.directive_prefix))

  error = walker.walk(source)
  if error is not None:
    return AnalysisResult.failed(error)
  return AnalysisResult.ok(builder.finalize())

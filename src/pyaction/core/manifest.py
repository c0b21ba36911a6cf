"""
Action Manifest and its Builder.

The ``Manifest`` is the structured result of analysing an action script:
its declared inputs and outputs in declaration order, plus the execution
directives derived from them (command line arguments for flag inputs,
environment mappings for environment inputs).

The ``ManifestBuilder`` is owned by a single analysis run. It only appends;
``finalize()`` derives the execution directives and returns a frozen
``Manifest``. Identical accumulated state always produces an identical
manifest, which lets callers diff generated files reliably.
"""

from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from pyaction.enums import InputKind

DefaultValue = Union[bool, int, str]


def argument_template(name: str) -> str:
  """
  Builds the command line argument passing input ``name`` as a flag.

  Args:
      name (str): Input name.

  Returns:
      str: e.g. ``-path=${{ inputs.path }}``.
  """
  return f"-{name}=${{{{ inputs.{name} }}}}"


def environment_template(name: str) -> str:
  """
  Builds the value expression exposing input ``name`` as an environment variable.

  Args:
      name (str): Input name.

  Returns:
      str: e.g. ``${{ inputs.token }}``.
  """
  return f"${{{{ inputs.{name} }}}}"


class InputRecord(BaseModel):
  """
  A declared action input.
  """

  model_config = ConfigDict(frozen=True)

  name: str = Field(..., description="Input name as seen by the workflow.")
  kind: InputKind = Field(..., description="Flag or environment sourced input.")
  default: Optional[DefaultValue] = Field(None, description="Default value, None when not declared.")
  description: str = Field("", description="Usage text.")
  required: bool = Field(False, description="Whether the workflow must provide the input.")


class OutputRecord(BaseModel):
  """
  A declared action output.
  """

  model_config = ConfigDict(frozen=True)

  name: str = Field(..., description="Output name.")
  description: str = Field("", description="Usage text.")


class Manifest(BaseModel):
  """
  The configuration surface of an action script.
  """

  model_config = ConfigDict(frozen=True)

  name: str = Field(..., description="Action name.")
  description: str = Field("", description="Action synopsis.")
  inputs: Tuple[Tuple[str, InputRecord], ...] = Field(default=(), description="Inputs in declaration order.")
  outputs: Tuple[Tuple[str, OutputRecord], ...] = Field(default=(), description="Outputs in declaration order.")
  argument_templates: Tuple[str, ...] = Field(default=(), description="Arguments passed to the entrypoint.")
  environment_templates: Tuple[Tuple[str, str], ...] = Field(
    default=(), description="Environment variables set for the entrypoint."
  )
  branding_icon: Optional[str] = Field(None, description="Marketplace icon, set by the caller.")
  branding_color: Optional[str] = Field(None, description="Marketplace color, set by the caller.")

  def input(self, name: str) -> Optional[InputRecord]:
    """Returns the first input declared as ``name``, if any."""
    for key, record in self.inputs:
      if key == name:
        return record
    return None

  def output(self, name: str) -> Optional[OutputRecord]:
    """Returns the first output declared as ``name``, if any."""
    for key, record in self.outputs:
      if key == name:
        return record
    return None

  @property
  def input_names(self) -> List[str]:
    return [key for key, _ in self.inputs]

  @property
  def output_names(self) -> List[str]:
    return [key for key, _ in self.outputs]

  def with_overrides(
    self,
    name: Optional[str] = None,
    description: Optional[str] = None,
    icon: Optional[str] = None,
    color: Optional[str] = None,
  ) -> "Manifest":
    """
    Returns a copy with caller supplied presentation fields applied.

    Empty or None values leave the corresponding field untouched.

    Args:
        name (Optional[str]): Replacement action name.
        description (Optional[str]): Replacement description.
        icon (Optional[str]): Branding icon.
        color (Optional[str]): Branding color.

    Returns:
        Manifest: A new manifest instance.
    """
    update: Dict[str, str] = {}
    if name:
      update["name"] = name
    if description:
      update["description"] = description
    if icon:
      update["branding_icon"] = icon
    if color:
      update["branding_color"] = color
    return self.model_copy(update=update)


class ManifestBuilder:
  """
  Accumulates declarations found during one traversal.

  Records are kept in call order; no deduplication or reordering happens here.
  """

  def __init__(self, name: str, description: str = ""):
    self.name = name
    self.description = description
    self._inputs: List[Tuple[str, InputRecord]] = []
    self._outputs: List[Tuple[str, OutputRecord]] = []

  def add_input(self, name: str, record: InputRecord) -> None:
    self._inputs.append((name, record))

  def add_output(self, name: str, record: OutputRecord) -> None:
    self._outputs.append((name, record))

  def has_input(self, name: str) -> bool:
    return any(key == name for key, _ in self._inputs)

  def has_output(self, name: str) -> bool:
    return any(key == name for key, _ in self._outputs)

  def finalize(self) -> Manifest:
    """
    Derives execution directives and freezes the accumulated state.

    Flag inputs become argument templates and environment inputs become
    environment templates, both in input declaration order.

    Returns:
        Manifest: The completed manifest.
    """
    arguments = [argument_template(name) for name, rec in self._inputs if rec.kind == InputKind.FLAG]
    environment = [(name, environment_template(name)) for name, rec in self._inputs if rec.kind == InputKind.ENVIRONMENT]

    return Manifest(
      name=self.name,
      description=self.description,
      inputs=tuple(self._inputs),
      outputs=tuple(self._outputs),
      argument_templates=tuple(arguments),
      environment_templates=tuple(environment),
    )

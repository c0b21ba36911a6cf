"""
Data structures representing the outcome of an analysis run.

This module defines the `AnalysisResult` Pydantic model, which holds either
the completed manifest or the first fatal error encountered. A result never
holds both: a manifest from an aborted run is discarded.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pyaction.core.errors import AnalysisError
from pyaction.core.manifest import Manifest


class AnalysisResult(BaseModel):
  """
  Container for the results of analysing one source file.
  """

  model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

  manifest: Optional[Manifest] = Field(default=None, description="The manifest, when analysis succeeded.")
  error: Optional[AnalysisError] = Field(default=None, description="The first fatal error, when analysis failed.")

  @model_validator(mode="after")
  def _exactly_one(self) -> "AnalysisResult":
    if (self.manifest is None) == (self.error is None):
      raise ValueError("AnalysisResult requires exactly one of 'manifest' or 'error'.")
    return self

  @classmethod
  def ok(cls, manifest: Manifest) -> "AnalysisResult":
    return cls(manifest=manifest)

  @classmethod
  def failed(cls, error: AnalysisError) -> "AnalysisResult":
    return cls(error=error)

  @property
  def success(self) -> bool:
    """
    Check if the analysis completed without errors.

    Returns:
        True if a manifest is available.
    """
    return self.error is None

  def unwrap(self) -> Manifest:
    """
    Returns the manifest or raises the stored error.

    Returns:
        Manifest: The completed manifest.

    Raises:
        AnalysisError: The error that aborted the analysis.
    """
    if self.error is not None:
      raise self.error
    return self.manifest

"""
Action File Rendering.

Serializes a ``Manifest`` into the ``action.yml`` metadata file and templates
the ``Dockerfile`` that runs the action script. Both renderers are pure: they
return text and leave writing to the caller.
"""

from pathlib import PurePath
from typing import Any, Dict, Union

import yaml

from pyaction.core.manifest import Manifest

ACTION_FILE = "action.yml"
DOCKER_FILE = "Dockerfile"
PYTHON_IMAGE = "python:3.12-slim"

DOCKERFILE_TEMPLATE = """\
FROM {image}
RUN apt-get update && apt-get install -y --no-install-recommends git && rm -rf /var/lib/apt/lists/*

COPY . /home/src/
WORKDIR /home/src
RUN if [ -f pyproject.toml ]; then pip install --no-cache-dir .; fi

ENTRYPOINT [ "python", "/home/src/{script}" ]
"""


def manifest_to_dict(manifest: Manifest) -> Dict[str, Any]:
  """
  Converts a manifest into the action metadata layout.

  Empty sections are omitted. Keys keep declaration order.

  Args:
      manifest (Manifest): The analysed manifest.

  Returns:
      Dict[str, Any]: Plain data ready for YAML serialization.
  """
  data: Dict[str, Any] = {"name": manifest.name}
  if manifest.description:
    data["description"] = manifest.description

  if manifest.inputs:
    inputs: Dict[str, Any] = {}
    for name, record in manifest.inputs:
      entry: Dict[str, Any] = {}
      if record.default is not None:
        entry["default"] = record.default
      entry["description"] = record.description
      entry["required"] = record.required
      inputs[name] = entry
    data["inputs"] = inputs

  if manifest.outputs:
    data["outputs"] = {name: {"description": record.description} for name, record in manifest.outputs}

  runs: Dict[str, Any] = {"using": "docker", "image": DOCKER_FILE}
  if manifest.environment_templates:
    runs["env"] = dict(manifest.environment_templates)
  if manifest.argument_templates:
    runs["args"] = list(manifest.argument_templates)
  data["runs"] = runs

  branding: Dict[str, str] = {}
  if manifest.branding_icon:
    branding["icon"] = manifest.branding_icon
  if manifest.branding_color:
    branding["color"] = manifest.branding_color
  if branding:
    data["branding"] = branding

  return data


def render_action_yaml(manifest: Manifest) -> str:
  """
  Renders the ``action.yml`` text.

  Args:
      manifest (Manifest): The analysed manifest.

  Returns:
      str: YAML document.
  """
  return yaml.safe_dump(manifest_to_dict(manifest), sort_keys=False, allow_unicode=True, default_flow_style=False)


def render_dockerfile(script_path: Union[str, PurePath], image: str = PYTHON_IMAGE) -> str:
  """
  Renders the ``Dockerfile`` running the action script.

  Args:
      script_path (Union[str, PurePath]): Script path relative to the repository root.
      image (str): Base image.

  Returns:
      str: Dockerfile text.
  """
  return DOCKERFILE_TEMPLATE.format(image=image, script=PurePath(script_path).as_posix())

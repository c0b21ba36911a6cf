"""
pyaction Package.

Turns a Python script into a GitHub Action. The script declares its inputs
with ``pyaction.flags`` and ``pyaction.action.getenv`` and its outputs with
``pyaction.action.output``; pyaction reads those declarations statically and
generates ``action.yml`` and a ``Dockerfile`` from them.

Usage
-----

Analysing a String
^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import pyaction

    code = '''
    \"\"\"Greets someone.\"\"\"
    from pyaction import flags
    who = flags.string("who", "world", "Who to greet.")
    '''
    manifest = pyaction.analyze_source(code, name="greeter")
    print(manifest.input_names)
    # ['who']

Advanced Usage
^^^^^^^^^^^^^^

.. code-block:: python

    from pyaction.analysis.walker import analyze
    from pyaction.config import RuntimeConfig
    from pyaction.core.ingestion import parse_source

    source = parse_source(code, filename="main.py", module_name="greeter")
    result = analyze(source, RuntimeConfig(directive_prefix="action"))
    if result.success:
        print(result.manifest)
    else:
        print(f"Error: {result.error}")
"""

from typing import Optional

from pyaction.analysis.walker import analyze
from pyaction.config import RuntimeConfig
from pyaction.core.ingestion import parse_source
from pyaction.core.manifest import Manifest

__version__ = "0.1.0"


def analyze_source(
  code: str,
  name: Optional[str] = None,
  filename: str = "<unknown>",
  config: Optional[RuntimeConfig] = None,
) -> Manifest:
  """
  Analyses a string of Python code and returns its manifest.

  This is a convenience wrapper around ``parse_source`` and ``analyze``.

  Args:
      code (str): The action script source.
      name (Optional[str]): Action name. Derived from ``filename`` when None.
      filename (str): File name used in error positions.
      config (Optional[RuntimeConfig]): Analysis settings.

  Returns:
      Manifest: The discovered inputs and outputs.

  Raises:
      libcst.ParserSyntaxError: If the code is not valid Python.
      AnalysisError: If the declarations are invalid.
  """
  source = parse_source(code, filename=filename, module_name=name)
  return analyze(source, config).unwrap()


__all__ = [
  "analyze_source",
  "__version__",
]

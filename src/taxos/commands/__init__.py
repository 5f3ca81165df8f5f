"""Built-in sub-commands of the ``taxos`` CLI.

* :mod:`~taxos.commands.convert` -- document to IR JSON files.
* :mod:`~taxos.commands.generate` -- IR JSON files to TypeScript.
* :mod:`~taxos.commands.build` -- both steps in one run.
* :mod:`~taxos.commands.inspect` -- read-only views of the normalized IR.
"""

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The compiler capability that benchmark jobs are built around.

Two phases, deliberately separate:
  - Compiler.configure(...) does the expensive setup once and returns a handle
  - CompilerHandle.run(sources) compiles, and can be called any number of times

The setup pipeline only ever calls configure. Running is the benchmark
harness's job.
"""

from benchprep.compiler.interfaces import (
    AnalysisCallback,
    CompileResult,
    Compiler,
    CompilerHandle,
    Diagnostic,
    Reporter,
)

__all__ = [
    "AnalysisCallback",
    "CompileResult",
    "Compiler",
    "CompilerHandle",
    "Diagnostic",
    "Reporter",
]

"""Build, CI and repository tooling for the dune-xt / dune-gdt modules.

Each command under tools/ wraps one of the packages in dxtci.core:
- ci: CI pipeline rendering and the docker env file
- docker: test image build/push orchestration
- git_ops: git runner and .gitsuper bookkeeping
- checks: repository hygiene checks (broken symlinks)
- depgraph: include dependency graphs and cycle reports
- testing: ini-driven test executable wrapper
"""

__version__ = "0.4.0"

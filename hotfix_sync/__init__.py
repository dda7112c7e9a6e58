"""hotfix-sync: one-commit-at-a-time integration of hotfix branches.

Integrates the commits of a release or hotfix branch into a development
branch one upstream commit at a time. Each step produces a commit message
that records where the change came from, and changes tagged as specific to
their branch are recorded as merged without taking their content.
"""

__version__ = "0.1.0"

"""launchkit - idempotent setup of web projects.

Detects which setup stages (framework scaffold, Git, GitHub repository,
Vercel deployment) a project already has and performs only the missing
ones, automatically or from an interactive menu.
"""

__version__ = "0.1.0"

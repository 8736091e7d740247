"""buildscope: build task timelines for the build dashboard.

Derives, from one immutable build snapshot:
  - a display class, tooltip and link per task
  - an elapsed-time estimate per task, live for running tasks
  - the build's max task duration, makespan and total processing time
  - task outcome counts and recent-build history strips

Every view is recomputed from scratch on each snapshot.
"""

__version__ = "0.1.0"
__description__ = "Build task timeline aggregation and dashboard"

from buildscope.monitor.projection import BuildProjection, LiveBoard
from buildscope.cli.app import app as cli

__all__ = ["BuildProjection", "LiveBoard", "cli", "__version__"]

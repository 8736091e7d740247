"""buildscope Build Monitor — projection, sources and terminal rendering.

The monitor NEVER maintains derived state of its own beyond the last
rendered view.  Every pass recomputes from a fresh snapshot.

Modules
-------
source
    Loads build and history records (JSON) into frozen snapshots.
projection
    ``BuildProjection`` turns a ``BuildSnapshot`` into a ``BuildView``;
    ``LiveBoard`` holds the latest view, replaced on every update.
renderer
    ``BuildRenderer`` turns views into Rich renderables, including
    continuous ``Rich.Live`` mode.
"""

"""buildscope Dashboard -- build page and history (Streamlit).

Still never computes truth of its own -- it renders the same views the
terminal monitor does.
"""

from buildscope.dashboard.app import create_dashboard

__all__ = ["create_dashboard"]

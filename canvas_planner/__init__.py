"""Canvas to Notion planner: task sync, daily updates and weekly reviews."""

__version__ = "0.1.0"

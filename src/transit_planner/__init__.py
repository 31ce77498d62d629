"""Transit network planner: stops, lines, catchment coverage and vehicle schedules."""

"""View rendering module for HTML templates.

Screens are computed from the view state by a pure function and drawn with
Jinja2 templates, separate from the routers.
"""

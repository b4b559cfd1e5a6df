"""Django project package for the clinic front-desk API."""

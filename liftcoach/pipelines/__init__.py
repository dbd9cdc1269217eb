"""
FastAPI backend for the Liftcoach mobile application.

Receives finished workout sessions from the app and returns the analytics
report produced by ``liftcoach.analytics``.
"""

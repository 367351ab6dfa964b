"""
Timer Triggers Module.

Provides a Blueprint with the scheduled triggers:
- job_output_status_sync: recovery of lost job output notifications

Usage in function_app.py:
    from triggers.timers import timer_bp
    app.register_blueprint(timer_bp)

Exports:
    timer_bp: Azure Functions Blueprint with all timer triggers
"""

from .timer_bp import bp as timer_bp

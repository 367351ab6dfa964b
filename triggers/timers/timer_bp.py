"""
Timer Triggers Blueprint.

Timer Schedule Overview:
    - job_output_status_sync: Every 15 minutes

Usage:
    from triggers.timers import timer_bp
    app.register_blueprint(timer_bp)
"""

import azure.functions as func

bp = func.Blueprint()


@bp.timer_trigger(
    schedule="0 */15 * * * *",
    arg_name="timer",
    run_on_startup=False
)
def job_output_status_sync(timer: func.TimerRequest) -> None:
    """
    Re-poll job outputs stuck in a non-terminal state.

    Covers lost Event Grid notifications for jobs that are not (or no
    longer) tracked by a verification request.
    """
    from triggers.timers.status_sync import status_sync_handler
    status_sync_handler(timer)

"""
Triggers Package.

Azure Functions trigger handlers. function_app.py declares the bindings
and delegates to the handlers here.

Subpackages:
    service_bus: job-verification-requests and job-output-status queues
    event_grid: Media Services job output state change events
    timers: Blueprint with the status sync timer

Handlers are imported from their subpackages directly so that importing
this package builds no services.
"""

"""Infrastructure modules for the onboarding retry service.

Centralized infrastructure components:
- configuration: Settings management (settings, RetrySettings)
- logging: Structured logging (get_module_logger, bind_event_context)
- events: In-process event bus
- operations: Operation results and error classification
- resilience: Retry lifecycle engine
- services: Dependency injection services (SettingsDep, RetryRecordStoreDep, get_settings)
"""

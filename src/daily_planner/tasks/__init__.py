"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, Category, Day, DailyCompletion)
- task_codec.py: `key: value` text encoding of the models
- task_store.py: flat-file storage + daily completion log
- task_api.py: prefix resolution, day aggregation and task services
- task_scheduler.py: daily reminder loop
"""

"""
Inspection domain module

- catalog: categories, corrective actions, per-category configuration
- schemas: report / item models
- models: daily_reports table
- repository: report store
- form: inspection form engine
- analytics: range statistics and dashboard listing
- navigation: view mode and fetch tickets
- summary: AI text summary
"""

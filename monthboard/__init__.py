# Monthly task board: month-scoped kanban state synchronized with a remote task store.
#
# Components:
#   schema.py     - Data model (Task, TaskStatus, Column)
#   window.py     - Month window navigation and date range
#   partition.py  - Splits a flat task list into ordered status columns
#   board.py      - Board aggregate and event reducer
#   client.py     - HTTP client for the remote task store
#   controller.py - Remote-first orchestration of board mutations
#   config.py     - YAML configuration
#   server.py     - Flask JSON API

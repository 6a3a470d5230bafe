"""Task Manager package.

Organized by feature modules (identity, users, tasks, kpi, ...) with a thin
Flask controller layer over service/repository layers. The evaluation and
reminder engines are pure functions over plain snapshots.
"""

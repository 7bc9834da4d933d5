"""Jobs batch executados fora do ciclo HTTP (scheduler/cron)."""

from app.jobs.reconcile_channels import run_reconciliation

__all__ = ["run_reconciliation"]

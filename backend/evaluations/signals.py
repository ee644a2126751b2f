# ===========================================================
# evaluations/signals.py
# ===========================================================
# Sent after commit whenever a completed evaluation is
# (re)calculated or an evaluation leaves the completed state.
#
# kwargs: evaluation, newly_completed
# Receivers: reports (rollup refresh), notifications (staff notice).
# ===========================================================

from django.dispatch import Signal

evaluation_recalculated = Signal()

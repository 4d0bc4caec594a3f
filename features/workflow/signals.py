from django.dispatch import Signal

# Sent after every goal status change, creation and deletion.
# kwargs: goal, actor, transition, feedback (reviews), title (deletion)
goal_transitioned = Signal()

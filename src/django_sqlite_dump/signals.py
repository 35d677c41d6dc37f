from django.dispatch import Signal

# Sent before a dump starts. Provides: database
pre_dump = Signal()
# Sent after a dump artifact is written. Provides: database, path
post_dump = Signal()
# Sent before a restore replays a script. Provides: database, path
pre_restore = Signal()
# Sent after a restore completes. Provides: database, path, backup
post_restore = Signal()

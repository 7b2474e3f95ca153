# No table of its own: the synced total is written to users.weekly_step_count.
# Step data itself is read on the device from the platform health store and
# reported as samples; the service only sums the current week's samples.

"""
A step source answers fetch_step_count(window_start, window_end) and may
raise PermissionDeniedError (health access refused) or UnavailableError
(health store unreachable). Either one leaves the stored count in place and
the sync reports it as stale.
"""

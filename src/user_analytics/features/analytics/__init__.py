"""
Admin analytics feature.

Read-only reports over users, generations and login logs for the
administrative dashboard: user lists and details, registration and login
time series, online duration and an overview panel.
"""

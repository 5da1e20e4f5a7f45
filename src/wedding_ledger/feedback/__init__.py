"""
Feedback Module - Alerts and the planning dashboard

Combines the budget and guest reports into one snapshot with an overall
risk level.
"""

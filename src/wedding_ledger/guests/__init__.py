"""
Guests Module - Headcount, logistics and guest cost projection

Estimates catering, room and transport exposure from guest rows, tracks
confirmation rate and raises guest alerts. Also imports guest lists and
family lists from CSV.
"""

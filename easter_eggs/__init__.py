"""
Client-side easter egg tracking.

An `EasterEggTracker` counts rapid clicks on the logo, unlocks eggs and
drives the transient matrix mode. A `UISession` owns one tracker per UI
session together with the signed-in principal.
"""

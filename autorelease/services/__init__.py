"""Application services for auto-release.

Services implement the release logic, coordinating between the core types
(core/) and the repository host (github/).
"""

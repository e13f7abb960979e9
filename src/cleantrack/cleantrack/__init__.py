"""CleanTrack package.

Feature modules (departments, workers, locations, checkins, deletion,
compliance) sit on top of a document store adapter and a live
subscription layer, with a thin Flask controller layer on top.
"""

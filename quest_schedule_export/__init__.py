"""
Export a PeopleSoft "My Class Schedule" page to an iCalendar (.ics) file.
"""
__version__ = "0.3.0"

"""
Institution tables for UC San Diego WebReg exports.

Everything school-specific lives here so another campus only needs a new copy of
this module: time zone, building codes, session-type codes and the fixed
VTIMEZONE definition written into exported calendars.
"""

INSTITUTION = "ucsd"
INSTITUTION_NAME = "UC San Diego"
CAMPUS_ADDRESS = "UC San Diego, La Jolla, CA"
TIMEZONE = "America/Los_Angeles"
UID_DOMAIN = "ucsd.edu"
PRODUCT_ID = "-//WebReg Calendar//UCSD Schedule//EN"

# Building code -> display name
BUILDINGS = {
    "CENTR": "Center Hall",
    "LEDDN": "Ledden Auditorium",
    "YORK": "York Hall",
    "PCYNH": "Price Center Theater",
    "PETER": "Peterson Hall",
    "WLH": "Warren Lecture Hall",
    "SOLIS": "Solis Hall",
    "PODEM": "Podemos",
    "MOS": "Mosaic",
    "CSB": "Cognitive Science Building",
    "EBU3B": "Engineering Building Unit 3B (CSE)",
    "EBU1": "Engineering Building Unit 1",
    "EBU2": "Engineering Building Unit 2",
    "JWMMC": "Jacobs Hall (JSOE)",
    "SME": "Structural & Materials Engineering",
    "MANDE": "Mandeville Center",
    "MAYER": "Mayer Hall",
    "UREY": "Urey Hall",
    "BONNER": "Bonner Hall",
    "NSB": "Natural Sciences Building",
    "PACIF": "Pacific Hall",
    "MYR-A": "Mayer Hall Addition",
    "HSS": "Humanities & Social Sciences",
    "GALB": "Galbraith Hall",
    "SEQUO": "Sequoyah Hall",
    "CRAWF": "Crawford Hall",
    "BSB": "Biomedical Sciences Building",
    "CMME": "Center for Molecular Medicine East",
    "CMMW": "Center for Molecular Medicine West",
    "MTF": "Medical Teaching Facility",
    "LSRI": "Leichtag Family Foundation Biomedical Research",
    "APM": "Applied Physics & Mathematics",
    "RCLAS": "Revelle College Classroom Building",
    "GAL": "Galbraith Hall",
    "RWAC": "Ridge Walk Academic Complex",
    "COA": "Center for Optimal Algebra",
    "PRICE": "Price Center",
    "CPMC": "Conrad Prebys Music Center",
    "DANCE": "Dance Studio",
    "GYM": "Main Gym",
    "RBC": "Robinson Building",
    "OTRSN": "Otterson Hall",
    "ERCA": "Eleanor Roosevelt College",
    "DIB": "Design & Innovation Building",
    "FAH": "Franklin Antonio Hall",
    "MOGU": "Mosaic",
    "CENTER": "Center Hall",
    "LEDN": "Ledden Auditorium",
    "GH": "Galbraith Hall",
    "HL": "Humanities Library",
    "REMOTE": "Remote/Online",
    "ONLINE": "Remote/Online",
}

# Tokens that are never building codes even though they are short uppercase words
NOT_BUILDINGS = {
    "DROP", "CHANGE", "ENROLLED", "WAITLIST", "STATUS", "POSITION", "PLANNED",
    "LE", "DI", "LA", "FI", "MI", "SE", "ACTION", "EMAIL", "STAFF",
    "L", "P", "NP", "PNP", "SU", "TBA",
}

# WebReg short code -> session kind display name
SESSION_TYPE_CODES = {
    "LE": "Lecture",
    "DI": "Discussion",
    "LA": "Lab",
    "MI": "Midterm",
    "FI": "Final Exam",
}

# Fixed America/Los_Angeles definition (US rules since 2007)
VTIMEZONE_LINES = [
    "BEGIN:VTIMEZONE",
    f"TZID:{TIMEZONE}",
    "BEGIN:DAYLIGHT",
    "TZOFFSETFROM:-0800",
    "TZOFFSETTO:-0700",
    "TZNAME:PDT",
    "DTSTART:20070311T020000",
    "RRULE:FREQ=YEARLY;BYMONTH=3;BYDAY=2SU",
    "END:DAYLIGHT",
    "BEGIN:STANDARD",
    "TZOFFSETFROM:-0700",
    "TZOFFSETTO:-0800",
    "TZNAME:PST",
    "DTSTART:20071104T020000",
    "RRULE:FREQ=YEARLY;BYMONTH=11;BYDAY=1SU",
    "END:STANDARD",
    "END:VTIMEZONE",
]


def building_name(code: str) -> str:
    return BUILDINGS.get((code or "").upper(), code)


def maps_location(location: str, building: str = "", room: str = "") -> str:
    """Turn "PETER 108" into "Peterson Hall 108, UC San Diego, La Jolla, CA".

    TBA / remote locations are returned unchanged so calendar apps do not try to
    geocode them.
    """
    if not location or location.upper() in ("TBA", "REMOTE", "ONLINE"):
        return location or "TBA"
    code = (building or location.split()[0]).upper()
    name = BUILDINGS.get(code)
    if name and code not in ("TBA", "REMOTE", "ONLINE"):
        room_part = room or location[len(code):].strip()
        return f"{name}{' ' + room_part if room_part else ''}, {CAMPUS_ADDRESS}"
    return f"{location}, {CAMPUS_ADDRESS}"

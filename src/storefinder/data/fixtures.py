"""Embedded store rows used when no authored catalog is configured."""

FIXTURE_ROWS: tuple[tuple[str, ...], ...] = (
    ("Name", "Address", "Coordinates", "Phone", "Hours", "Services", "Photo", "Details"),
    (
        "Pearl District Market",
        "1130 NW Couch St, Portland, OR, 97209",
        "45.5235, -122.6826",
        "503-555-0101",
        "Mon-Sat: 9AM-9PM, Sun: 10AM-8PM",
        "pharmacy, pickup, deli, bakery",
        "",
        "Free parking, Wheelchair accessible",
    ),
    (
        "Hawthorne Grocery",
        "3535 SE Hawthorne Blvd, Portland, OR, 97214",
        "45.5121, -122.6270",
        "503-555-0102",
        "24 hours",
        "24-hour, pickup, delivery",
        "",
        "EV charging",
    ),
    (
        "Beaverton Town Square",
        "11705 SW Beaverton Hillsdale Hwy, Beaverton, OR, 97005",
        "45.4856, -122.8035",
        "503-555-0103",
        "",
        "pharmacy, delivery, bakery",
        "",
        "",
    ),
    (
        "St. Johns Corner Store",
        "8445 N Lombard St, Portland, OR, 97203",
        "45.5903, -122.7540",
        "503-555-0104",
        "Mon-Fri: 8AM-9PM",
        "deli",
        "",
        "",
    ),
    (
        "Lake Oswego Fresh",
        "333 S State St, Lake Oswego, OR, 97034",
        "45.4168, -122.6679",
        "503-555-0105",
        '{"monday": {"open": "07:00", "close": "22:00"}, "tuesday": {"open": "07:00", "close": "22:00"},'
        ' "wednesday": {"open": "07:00", "close": "22:00"}, "thursday": {"open": "07:00", "close": "22:00"},'
        ' "friday": {"open": "07:00", "close": "23:00"}, "saturday": {"open": "08:00", "close": "23:00"}}',
        "pickup, bakery, pharmacy",
        "",
        "Drive-thru pharmacy",
    ),
    # Staged for a future opening; dropped until coordinates are authored.
    ("Gresham Station", "987 NW Civic Dr, Gresham, OR, 97030", "", "", "", "pickup"),
)

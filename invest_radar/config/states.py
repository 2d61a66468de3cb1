"""
Indian states and union territories with their name variants.

Each entry lists:
- names: spellings matched case-insensitively (regex fragments)
- abbreviations: matched case-sensitively as whole words ("UP", not "up")
- cities: major cities/industrial hubs that place an article in the state

`canonical_state()` only consults names and abbreviations; cities are used
for detection in article text, never to rename a state value.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StateAlias:
    state: str
    names: tuple[str, ...]
    abbreviations: tuple[str, ...] = ()
    cities: tuple[str, ...] = ()


STATE_TABLE_VERSION = "2025.1"

STATE_TABLE: tuple[StateAlias, ...] = (
    StateAlias(
        "Andhra Pradesh", (r"Andhra\s*Pradesh",), ("AP",),
        ("Visakhapatnam", "Vizag", "Vijayawada", "Amaravati", "Tirupati", "Guntur",
         "Nellore", "Kakinada", "Anantapur", "Sri City"),
    ),
    StateAlias("Arunachal Pradesh", (r"Arunachal\s*Pradesh",), (), ("Itanagar",)),
    StateAlias("Assam", ("Assam",), (), ("Guwahati", "Dibrugarh", "Silchar")),
    StateAlias("Bihar", ("Bihar",), (), ("Patna", "Muzaffarpur", "Bhagalpur")),
    StateAlias("Chhattisgarh", ("Chhattisgarh", "Chattisgarh"), (), ("Raipur", "Bhilai", "Korba")),
    StateAlias("Goa", ("Goa",), (), ("Panaji", "Vasco da Gama")),
    StateAlias(
        "Gujarat", ("Gujarat",), (),
        ("Ahmedabad", "Surat", "Vadodara", "Rajkot", "Gandhinagar", "Dholera", "Sanand",
         "Jamnagar", "Bharuch", "Mundra", "Hazira", "Kutch"),
    ),
    StateAlias("Haryana", ("Haryana",), (), ("Gurugram", "Gurgaon", "Faridabad", "Manesar", "Panipat", "Sonipat")),
    StateAlias("Himachal Pradesh", (r"Himachal\s*Pradesh",), ("HP",), ("Shimla", "Baddi", "Nalagarh")),
    StateAlias("Jharkhand", ("Jharkhand",), (), ("Ranchi", "Jamshedpur", "Dhanbad", "Bokaro")),
    StateAlias(
        "Karnataka", ("Karnataka",), (),
        ("Bengaluru", "Bangalore", "Mysuru", "Mysore", "Mangaluru", "Mangalore", "Hubballi",
         "Hubli", "Belagavi", "Dharwad", "Tumakuru"),
    ),
    StateAlias("Kerala", ("Kerala",), (), ("Kochi", "Cochin", "Thiruvananthapuram", "Kozhikode", "Vizhinjam")),
    StateAlias("Madhya Pradesh", (r"Madhya\s*Pradesh",), ("MP",), ("Bhopal", "Indore", "Jabalpur", "Gwalior", "Pithampur")),
    StateAlias("Maharashtra", ("Maharashtra",), (), ("Mumbai", "Pune", "Nagpur", "Nashik", "Chakan", "Talegaon", "Thane", "Raigad")),
    StateAlias("Manipur", ("Manipur",), (), ("Imphal",)),
    StateAlias("Meghalaya", ("Meghalaya",), (), ("Shillong",)),
    StateAlias("Mizoram", ("Mizoram",), (), ("Aizawl",)),
    StateAlias("Nagaland", ("Nagaland",), (), ("Kohima", "Dimapur")),
    StateAlias(
        "Odisha", ("Odisha", "Orissa"), (),
        ("Bhubaneswar", "Cuttack", "Paradip", "Jharsuguda", "Kalinganagar", "Rourkela", "Angul", "Gopalpur"),
    ),
    StateAlias("Punjab", ("Punjab",), (), ("Ludhiana", "Amritsar", "Jalandhar", "Mohali", "Bathinda")),
    StateAlias("Rajasthan", ("Rajasthan",), (), ("Jaipur", "Jodhpur", "Udaipur", "Bhiwadi", "Neemrana")),
    StateAlias("Sikkim", ("Sikkim",), (), ("Gangtok",)),
    StateAlias(
        "Tamil Nadu", (r"Tamil\s*Nadu", "Tamilnadu"), ("TN",),
        ("Chennai", "Coimbatore", "Madurai", "Hosur", "Sriperumbudur", "Tiruchirappalli", "Trichy",
         "Thoothukudi", "Tuticorin", "Oragadam"),
    ),
    StateAlias("Telangana", ("Telangana",), (), ("Hyderabad", "Secunderabad", "Warangal")),
    StateAlias("Tripura", ("Tripura",), (), ("Agartala",)),
    StateAlias(
        "Uttar Pradesh", (r"Uttar\s*Pradesh",), ("UP",),
        ("Lucknow", "Noida", "Kanpur", "Ghaziabad", "Varanasi", "Prayagraj", "Agra", "Jewar"),
    ),
    StateAlias("Uttarakhand", ("Uttarakhand", "Uttaranchal"), (), ("Dehradun", "Haridwar", "Rudrapur", "Pantnagar")),
    StateAlias("West Bengal", (r"West\s*Bengal",), ("WB",), ("Kolkata", "Howrah", "Durgapur", "Haldia", "Siliguri", "Kharagpur")),
    # Union territories
    StateAlias("Delhi", ("Delhi", r"NCT\s+of\s+Delhi")),
    StateAlias("Jammu and Kashmir", (r"Jammu\s*(?:and|&)\s*Kashmir",), ("J&K",), ("Srinagar",)),
    StateAlias("Ladakh", ("Ladakh",), (), ("Leh",)),
    StateAlias("Puducherry", ("Puducherry", "Pondicherry"), (), ("Karaikal",)),
    StateAlias("Chandigarh", ("Chandigarh",)),
    StateAlias("Andaman and Nicobar Islands", (r"Andaman\s*(?:and|&)?\s*Nicobar",), (), ("Port Blair",)),
    StateAlias(
        "Dadra and Nagar Haveli and Daman and Diu",
        (r"Dadra\s*(?:and|&)?\s*Nagar\s*Haveli", r"Daman\s*(?:and|&)?\s*Diu"), (), ("Silvassa",),
    ),
    StateAlias("Lakshadweep", ("Lakshadweep",), (), ("Kavaratti",)),
)

ALL_STATES: tuple[str, ...] = tuple(a.state for a in STATE_TABLE)

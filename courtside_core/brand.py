APP_NAME = "Courtside"
TAGLINE = "Roster, attendance and box scores for your basketball team"
DISCLAIMER = "Averages are computed from recorded games only. Unrecorded games count as zero."

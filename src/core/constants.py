# Type id SportMonks v3 (trends / fixtureStatistics)
CORNERS_TYPE_ID = 34
DANGEROUS_ATTACKS_TYPE_ID = 44

# Relazioni richieste all'endpoint livescores/inplay
LIVESCORES_INCLUDES = ("periods", "scores", "trends", "participants", "statistics")

HOME_PLACEHOLDER = "Home"
AWAY_PLACEHOLDER = "Away"
MINUTE_PLACEHOLDER = "-"

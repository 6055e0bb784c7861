"""Sample images seeded by the fixture endpoint."""

TEST_FIXTURES = [
    {
        "slug": "fixture-red",
        "filename": "fixture-red.png",
        "description": "Solid red pixel",
        "base64": "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAIAAACQd1PeAAAACXBIWXMAAAPoAAAD6AG1e1JrAAAADElEQVR4nGP4z8AAAAMBAQDJ/pLvAAAAAElFTkSuQmCC",
    },
    {
        "slug": "fixture-green",
        "filename": "fixture-green.png",
        "description": "Solid green pixel",
        "base64": "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAIAAACQd1PeAAAACXBIWXMAAAPoAAAD6AG1e1JrAAAADElEQVR4nGNg+M8AAAICAQB7CYF4AAAAAElFTkSuQmCC",
    },
    {
        "slug": "fixture-blue",
        "filename": "fixture-blue.png",
        "description": "Solid blue pixel",
        "base64": "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAIAAACQd1PeAAAACXBIWXMAAAPoAAAD6AG1e1JrAAAADElEQVR4nGNgYPgPAAEDAQAIicLsAAAAAElFTkSuQmCC",
    },
]

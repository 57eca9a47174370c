"""GameCard: batch cover + marquee card composer."""

"""Social network storage core: accounts, posts, comments, followers and feeds."""

from tea_rank_badge.cli import app

app(prog_name="tea-rank-badge")

"""Install task execution."""

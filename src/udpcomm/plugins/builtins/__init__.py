"""Built-in plugins shipped with udpcomm."""

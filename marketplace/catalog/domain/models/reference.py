from django.db import models


class Server(models.Model):
    name = models.CharField(max_length=50, unique=True)
    display_name = models.CharField(max_length=100)

    class Meta:
        app_label = "marketplace"
        ordering = ["name"]

    def __str__(self):
        return self.display_name


class Category(models.Model):
    name = models.SlugField(max_length=50, unique=True)
    display_name = models.CharField(max_length=100)
    icon = models.CharField(max_length=50, blank=True)
    color = models.CharField(max_length=20, blank=True)
    parent = models.ForeignKey("self", on_delete=models.CASCADE, null=True, blank=True, related_name="children")

    class Meta:
        app_label = "marketplace"
        verbose_name_plural = "Categories"
        ordering = ["name"]

    def __str__(self):
        return self.display_name

    @property
    def root(self):
        return self.parent if self.parent_id else self
